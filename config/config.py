import os


def env_flag(name: str, default: str) -> bool:
    return bool(int(os.environ.get(name, default)))


class Config:
    SECRET_KEY = os.environ.get("SECRET_KEY") or "dev-secret-key"

    # DB
    DB_USER = os.environ.get("DB_USER", "root")
    DB_PASSWORD = os.environ.get("DB_PASSWORD", "")
    DB_HOST = os.environ.get("DB_HOST", "localhost")
    DB_PORT = int(os.environ.get("DB_PORT", "3306"))
    DB_NAME = os.environ.get("DB_NAME", "campus_attendance")

    # Dev helpers
    AUTO_INIT_DB = env_flag("AUTO_INIT_DB", "0")
    AUTO_SEED_DB = env_flag("AUTO_SEED_DB", "0")

    # Rotating QR codes
    QR_FRESHNESS_WINDOW_MS = int(os.environ.get("QR_FRESHNESS_WINDOW_MS", "15000"))
    ALLOW_UNSTAMPED_TOKENS = env_flag("ALLOW_UNSTAMPED_TOKENS", "1")

    # Geofence (fail-closed: set LOCATION_VALIDATION_ENABLED=0 to skip checks)
    GEOFENCE_RADIUS_METERS = float(os.environ.get("GEOFENCE_RADIUS_METERS", os.environ.get("ACCEPTABLE_RADIUS_METERS", "200")))
    LOCATION_VALIDATION_ENABLED = env_flag("LOCATION_VALIDATION_ENABLED", "1")

    # Identity provider (ID tokens verified with a shared secret)
    IDENTITY_JWT_SECRET = os.environ.get("IDENTITY_JWT_SECRET", "change-me")
    IDENTITY_JWT_ALGORITHMS = tuple(a.strip() for a in os.environ.get("IDENTITY_JWT_ALGORITHMS", "HS256").split(",") if a.strip())
    IDENTITY_JWT_AUDIENCE = os.environ.get("IDENTITY_JWT_AUDIENCE") or None
    IDENTITY_JWT_ISSUER = os.environ.get("IDENTITY_JWT_ISSUER") or None

    # Progression
    ATTENDANCE_XP = int(os.environ.get("ATTENDANCE_XP", "10"))
    TASK_BONUS_XP = int(os.environ.get("TASK_BONUS_XP", "50"))
    TASK_COOLDOWN_MINUTES = int(os.environ.get("TASK_COOLDOWN_MINUTES", "15"))

    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")
    LOG_FILE = os.environ.get("LOG_FILE") or None

    DB_CONFIG = {
        "host": DB_HOST,
        "port": DB_PORT,
        "user": DB_USER,
        "password": DB_PASSWORD,
        "database": DB_NAME,
    }
