import os

SECRET_KEY = "test-secret"

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "qr_attendance_test"),
}

DEBUG = False
TESTING = True
LOG_LEVEL = "WARNING"

AUTO_INIT_DB = False

CAMERA_MAX_PROBE = 0
CAMERA_URLS = []
REQUIRE_SECURE_STREAMS = False
SCAN_INTERVAL_SECONDS = 0.01
AUTO_START_CAMERA = False
