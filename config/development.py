import os

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "beacon_attendance"),
    "connection_timeout": int(os.getenv("DB_TIMEOUT", "10")),
}

# "mysql" or "memory" (in-process maps, lost on restart)
STORAGE_BACKEND = os.getenv("STORAGE_BACKEND", "memory")

DEBUG = True
LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")

# Roster size used by stats when the caller does not pass one.
DEFAULT_TOTAL_ENROLLED = int(os.getenv("DEFAULT_TOTAL_ENROLLED", "30"))

# If enabled, app will apply schema.sql on startup (idempotent: CREATE IF NOT EXISTS)
AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))
# Optional: also seed demo data on startup
AUTO_SEED_DB = bool(int(os.getenv("AUTO_SEED_DB", "1")))
