"""Portfolio CMS.

A personal portfolio website with a content-management admin panel.

Core subpackages
----------------

- ``portfolio_cms.core``:

  - Logging and Logfire monitoring.
  - The caching layer: LRU cache manager, tag-aware API cache and the query
    optimizer used by every public read.
  - SQLModel entities, repositories and the async session factory.
  - Security primitives (password hashing, admin tokens, TOTP).

- ``portfolio_cms.server``:

  - The FastAPI application, public and admin routers, middleware
    (request logging, admin auth, response caching) and Jinja2 pages.

- ``portfolio_cms.scripts``:

  - Operational scripts such as database seeding.
"""

__version__ = "0.1.0"
