import os

from config import env_list

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "qr_attendance_db"),
}

DEBUG = True
LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")

# If enabled, app will apply schema.sql on startup (idempotent: CREATE IF NOT EXISTS)
AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "1")))

# Camera / scanning
CAMERA_MAX_PROBE = int(os.getenv("CAMERA_MAX_PROBE", "4"))
CAMERA_URLS = env_list("CAMERA_URLS")
REQUIRE_SECURE_STREAMS = bool(int(os.getenv("REQUIRE_SECURE_STREAMS", "0")))
SCAN_INTERVAL_SECONDS = float(os.getenv("SCAN_INTERVAL_SECONDS", "0.2"))
AUTO_START_CAMERA = bool(int(os.getenv("AUTO_START_CAMERA", "0")))
