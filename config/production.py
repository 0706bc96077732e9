import os

SECRET_KEY = os.getenv("SECRET_KEY", "please-set-SECRET_KEY")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "tutoring_db"),
}

ARCHIVE_CACHE_PATH = os.getenv("ARCHIVE_CACHE_PATH", "instance/archive_cache.json")

RECORD_PAYMENT_REVERSALS = bool(int(os.getenv("RECORD_PAYMENT_REVERSALS", "0")))

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

DEBUG = False

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))
