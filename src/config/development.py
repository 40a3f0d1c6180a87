import os

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

MONGO_CONFIG = {
    "uri": os.getenv("MONGODB_URI", "mongodb://localhost:27017"),
    "database": os.getenv("MONGODB_DB", "labour_management"),
}

# Signing key for access/refresh tokens
JWT_SECRET = os.getenv("JWT_SECRET", "dev-jwt-secret")
ACCESS_TOKEN_MINUTES = int(os.getenv("ACCESS_TOKEN_MINUTES", "60"))
REFRESH_TOKEN_DAYS = int(os.getenv("REFRESH_TOKEN_DAYS", "10"))

EXPORT_MAX_RECORDS = int(os.getenv("EXPORT_MAX_RECORDS", "10000"))

DEBUG = True
LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")
COOKIE_SECURE = False

# If enabled, app will create the collection indexes on startup (idempotent)
AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "1")))
# Optional: also upsert the demo admin/manager accounts
AUTO_SEED_DB = bool(int(os.getenv("AUTO_SEED_DB", "0")))
