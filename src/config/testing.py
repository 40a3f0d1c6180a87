import os

SECRET_KEY = "test-secret"

MONGO_CONFIG = {
    "uri": os.getenv("MONGODB_URI", "mongodb://localhost:27017"),
    "database": os.getenv("MONGODB_DB", "labour_management_test"),
}

JWT_SECRET = "test-jwt-secret"
ACCESS_TOKEN_MINUTES = 5
REFRESH_TOKEN_DAYS = 1

EXPORT_MAX_RECORDS = 100

DEBUG = False
TESTING = True
LOG_LEVEL = "WARNING"
COOKIE_SECURE = False

AUTO_INIT_DB = False
AUTO_SEED_DB = False
