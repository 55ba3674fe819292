import os

SECRET_KEY = "test-secret"

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "facesync_test"),
}

STORAGE_BACKEND = "memory"
MEMORY_ROSTERS = {}

MATCH_THRESHOLD = 0.2
LANDMARK_DIM = None
LANDMARK_POINT_DIM = 2
TEMPLATE_CACHE_SECONDS = 0.0

SESSION_UPDATE_ATTEMPTS = 5
SESSION_LOCK_TIMEOUT = 2.0

DEBUG = False
TESTING = True
LOG_LEVEL = "WARNING"
LOG_DIR = None

AUTO_INIT_DB = False
