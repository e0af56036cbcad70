PROJECT_NAME = "Portfolio CMS"
VERSION = "0.1.0"
API_PREFIX = "/api"
ADMIN_API_PREFIX = "/api/admin"
