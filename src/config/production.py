import os

SECRET_KEY = os.getenv("SECRET_KEY", "please-set-SECRET_KEY")

MONGO_CONFIG = {
    "uri": os.getenv("MONGODB_URI", "mongodb://localhost:27017"),
    "database": os.getenv("MONGODB_DB", "labour_management"),
}

JWT_SECRET = os.getenv("JWT_SECRET", "please-set-JWT_SECRET")
ACCESS_TOKEN_MINUTES = int(os.getenv("ACCESS_TOKEN_MINUTES", "60"))
REFRESH_TOKEN_DAYS = int(os.getenv("REFRESH_TOKEN_DAYS", "10"))

EXPORT_MAX_RECORDS = int(os.getenv("EXPORT_MAX_RECORDS", "10000"))

DEBUG = False
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
COOKIE_SECURE = True

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))
AUTO_SEED_DB = bool(int(os.getenv("AUTO_SEED_DB", "0")))
