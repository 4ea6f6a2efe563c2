import os

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "attendance"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "attendance_db"),
}

ATTENDANCE_TIMEZONE = os.getenv("ATTENDANCE_TIMEZONE", "UTC")
LATE_CUTOFF = os.getenv("LATE_CUTOFF", "09:00")

HISTORY_LIMIT = int(os.getenv("HISTORY_LIMIT", "100"))
RECORDS_LIMIT = int(os.getenv("RECORDS_LIMIT", "500"))

DEBUG = False
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))
