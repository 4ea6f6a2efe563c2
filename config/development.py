import os

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "attendance_db"),
}

# Calendar days and the late cutoff are evaluated in this zone.
ATTENDANCE_TIMEZONE = os.getenv("ATTENDANCE_TIMEZONE", "UTC")
LATE_CUTOFF = os.getenv("LATE_CUTOFF", "09:00")

HISTORY_LIMIT = int(os.getenv("HISTORY_LIMIT", "100"))
RECORDS_LIMIT = int(os.getenv("RECORDS_LIMIT", "500"))

DEBUG = True
LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")

# If enabled, app will apply schema.sql on startup (idempotent: CREATE IF NOT EXISTS)
AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "1")))
