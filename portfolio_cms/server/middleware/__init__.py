"""
Middleware package.

- ``RequestLoggingMiddleware``: timing, request ids and monitoring
- ``AdminAuthMiddleware``: admin token verification for ``/admin`` and ``/api/admin``
- ``ResponseCacheMiddleware``: cached public content responses
"""

from .admin_auth_middleware import AdminAuthMiddleware
from .cache_middleware import ResponseCacheMiddleware
from .request_logging_middleware import RequestLoggingMiddleware

__all__ = ["AdminAuthMiddleware", "RequestLoggingMiddleware", "ResponseCacheMiddleware"]
