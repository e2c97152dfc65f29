import os

SECRET_KEY = "test-secret"

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "crew_attendance_test"),
}

DEBUG = False
TESTING = True
LOG_LEVEL = "WARNING"

REQUIRE_BREAK_BEFORE_DEPART = False

DEFAULT_REPORT_DAYS = 7

AUTO_INIT_DB = False
