import os

from config import env_list

SECRET_KEY = os.getenv("SECRET_KEY", "please-set-SECRET_KEY")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "qr_attendance_db"),
}

DEBUG = False
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))

CAMERA_MAX_PROBE = int(os.getenv("CAMERA_MAX_PROBE", "4"))
CAMERA_URLS = env_list("CAMERA_URLS")
# Network cameras must use https/rtsps unless explicitly relaxed.
REQUIRE_SECURE_STREAMS = bool(int(os.getenv("REQUIRE_SECURE_STREAMS", "1")))
SCAN_INTERVAL_SECONDS = float(os.getenv("SCAN_INTERVAL_SECONDS", "0.2"))
AUTO_START_CAMERA = bool(int(os.getenv("AUTO_START_CAMERA", "1")))
