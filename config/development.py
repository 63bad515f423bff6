import os

from .config import Config

SECRET_KEY = Config.SECRET_KEY
DB_CONFIG = Config.DB_CONFIG

QR_FRESHNESS_WINDOW_MS = Config.QR_FRESHNESS_WINDOW_MS
ALLOW_UNSTAMPED_TOKENS = Config.ALLOW_UNSTAMPED_TOKENS
GEOFENCE_RADIUS_METERS = Config.GEOFENCE_RADIUS_METERS
LOCATION_VALIDATION_ENABLED = Config.LOCATION_VALIDATION_ENABLED

IDENTITY_JWT_SECRET = Config.IDENTITY_JWT_SECRET
IDENTITY_JWT_ALGORITHMS = Config.IDENTITY_JWT_ALGORITHMS
IDENTITY_JWT_AUDIENCE = Config.IDENTITY_JWT_AUDIENCE
IDENTITY_JWT_ISSUER = Config.IDENTITY_JWT_ISSUER

ATTENDANCE_XP = Config.ATTENDANCE_XP
TASK_BONUS_XP = Config.TASK_BONUS_XP
TASK_COOLDOWN_MINUTES = Config.TASK_COOLDOWN_MINUTES

DEBUG = True
LOG_LEVEL = "DEBUG"
LOG_FILE = Config.LOG_FILE

# If enabled, app will apply schema.sql on startup (idempotent: CREATE IF NOT EXISTS)
AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "1")))
# Optional: also seed demo data on startup
AUTO_SEED_DB = Config.AUTO_SEED_DB
