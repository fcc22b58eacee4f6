import os

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "attendance_portal"),
}

DEBUG = True
LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")

# If enabled, schema.sql is applied on startup (idempotent: CREATE IF NOT EXISTS)
AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "1")))

# Attendance policy
DEFAULTER_THRESHOLD = int(os.getenv("DEFAULTER_THRESHOLD", "75"))
EDIT_ABUSE_THRESHOLD = int(os.getenv("EDIT_ABUSE_THRESHOLD", "3"))
REQUIRE_MARK_TO_LOCK = bool(int(os.getenv("REQUIRE_MARK_TO_LOCK", "0")))
