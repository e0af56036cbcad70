"""
Admin API routers.

Everything except ``auth`` is mounted behind the admin authentication
dependency in ``portfolio_cms.server.main``.
"""
