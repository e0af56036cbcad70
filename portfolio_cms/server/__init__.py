"""
Portfolio CMS Server Package.

This package contains the web server implementation: the public JSON API, the
admin API, middleware and the server-rendered public pages.
"""
