import os

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "tutoring_db"),
}

# Local key-value file holding fee timelines of deleted groups
ARCHIVE_CACHE_PATH = os.getenv("ARCHIVE_CACHE_PATH", "instance/archive_cache.json")

# Append a negative history entry when a paid session is marked unpaid
RECORD_PAYMENT_REVERSALS = bool(int(os.getenv("RECORD_PAYMENT_REVERSALS", "0")))

LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")

DEBUG = True

# If enabled, app will apply schema.sql on startup (idempotent: CREATE IF NOT EXISTS)
AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "1")))
