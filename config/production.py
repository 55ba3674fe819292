import os

from config import parse_rosters

SECRET_KEY = os.getenv("SECRET_KEY", "please-set-SECRET_KEY")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "facesync_db"),
}

STORAGE_BACKEND = os.getenv("STORAGE_BACKEND", "mysql")

# Course rosters for the memory backend, e.g. {"CSC101": ["SV01", "SV02"]}
MEMORY_ROSTERS = parse_rosters(os.getenv("MEMORY_ROSTERS"))

MATCH_THRESHOLD = float(os.getenv("MATCH_THRESHOLD", "0.2"))
LANDMARK_DIM = int(os.getenv("LANDMARK_DIM", "0")) or None
LANDMARK_POINT_DIM = int(os.getenv("LANDMARK_POINT_DIM", "2"))
TEMPLATE_CACHE_SECONDS = float(os.getenv("TEMPLATE_CACHE_SECONDS", "30"))

SESSION_UPDATE_ATTEMPTS = int(os.getenv("SESSION_UPDATE_ATTEMPTS", "5"))
SESSION_LOCK_TIMEOUT = float(os.getenv("SESSION_LOCK_TIMEOUT", "2.0"))

DEBUG = False
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
LOG_DIR = os.getenv("LOG_DIR", "logs")

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))
