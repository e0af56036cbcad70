"""Public JSON API and SEO routes."""
