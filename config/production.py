import os

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "attendance_portal"),
}

DEBUG = False
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))

DEFAULTER_THRESHOLD = int(os.getenv("DEFAULTER_THRESHOLD", "75"))
EDIT_ABUSE_THRESHOLD = int(os.getenv("EDIT_ABUSE_THRESHOLD", "3"))
REQUIRE_MARK_TO_LOCK = bool(int(os.getenv("REQUIRE_MARK_TO_LOCK", "0")))
