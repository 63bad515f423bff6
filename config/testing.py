import os

SECRET_KEY = "test-secret"

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "campus_attendance_test"),
}

QR_FRESHNESS_WINDOW_MS = 15000
ALLOW_UNSTAMPED_TOKENS = True
GEOFENCE_RADIUS_METERS = 200
LOCATION_VALIDATION_ENABLED = True

IDENTITY_JWT_SECRET = "test-identity-secret-0123456789abcdef"
IDENTITY_JWT_ALGORITHMS = ("HS256",)
IDENTITY_JWT_AUDIENCE = None
IDENTITY_JWT_ISSUER = None

ATTENDANCE_XP = 10
TASK_BONUS_XP = 50
TASK_COOLDOWN_MINUTES = 15

DEBUG = False
TESTING = True
LOG_LEVEL = "DEBUG"
LOG_FILE = None

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))
AUTO_SEED_DB = bool(int(os.getenv("AUTO_SEED_DB", "0")))
