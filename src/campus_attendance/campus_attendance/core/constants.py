"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

TOKEN_SEPARATOR = "|"
DEFAULT_FRESHNESS_WINDOW_MS = 15_000

EARTH_RADIUS_METERS = 6_371_000
DEFAULT_GEOFENCE_RADIUS_METERS = 200

DEFAULT_ATTENDANCE_XP = 10
DEFAULT_TASK_BONUS_XP = 50
DEFAULT_TASK_COOLDOWN_MINUTES = 15

PROFILE_SCHEMA_VERSION = 1
MAX_PROFILE_EXTENSION_KEYS = 16
MAX_PROFILE_EXTENSION_KEY_LENGTH = 64

ANALYTICS_WINDOW_DAYS = 7
WEEKDAY_LABELS = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")
