"""
Server-side services.

Business logic shared by the API routers and the public pages: cached content
reads, authentication, audit logging, the chatbot, newsletter integration,
backups, uploads and SEO documents.
"""
