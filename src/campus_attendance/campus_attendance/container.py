from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.repository import AttendanceRepository
from .attendance.service import AttendanceAnalyticsService, AttendanceService
from .core.constants import (
    DEFAULT_ATTENDANCE_XP,
    DEFAULT_FRESHNESS_WINDOW_MS,
    DEFAULT_GEOFENCE_RADIUS_METERS,
    DEFAULT_TASK_BONUS_XP,
    DEFAULT_TASK_COOLDOWN_MINUTES,
)
from .database.connection import DatabaseConnection, DBConfig
from .geofence.service import GeofenceValidator
from .identity.jwt_verifier import JWTIdentityVerifier
from .identity.verifier import IdentityVerifier
from .progression.mysql_progression_repository import MySQLProgressionRepository
from .progression.repository import ProgressionRepository
from .progression.service import ProgressionService
from .sessions.mysql_session_repository import MySQLSessionRepository
from .sessions.repository import SessionRepository
from .sessions.service import SessionService
from .tokens.service import RotatingTokenValidator


@dataclass(frozen=True)
class Container:
    attendance_repo: AttendanceRepository
    sessions_repo: SessionRepository
    progression_repo: ProgressionRepository

    identity_verifier: IdentityVerifier
    token_validator: RotatingTokenValidator
    geofence: GeofenceValidator

    session_service: SessionService
    progression_service: ProgressionService
    attendance_service: AttendanceService
    analytics_service: AttendanceAnalyticsService


def wire_container(
    *,
    attendance_repo: AttendanceRepository,
    sessions_repo: SessionRepository,
    progression_repo: ProgressionRepository,
    identity_verifier: IdentityVerifier,
    settings: Optional[Any] = None,
) -> Container:
    """Assemble services on top of the given repositories.

    `settings` is a settings module (or any object) read with getattr; missing
    values fall back to the defaults in core.constants.
    """

    def setting(name: str, default):
        return getattr(settings, name, default) if settings is not None else default

    token_validator = RotatingTokenValidator(
        freshness_window_ms=int(setting("QR_FRESHNESS_WINDOW_MS", DEFAULT_FRESHNESS_WINDOW_MS)),
        allow_unstamped=bool(setting("ALLOW_UNSTAMPED_TOKENS", True)),
    )
    geofence = GeofenceValidator(
        radius_m=float(setting("GEOFENCE_RADIUS_METERS", DEFAULT_GEOFENCE_RADIUS_METERS)),
        enabled=bool(setting("LOCATION_VALIDATION_ENABLED", True)),
    )

    session_service = SessionService(sessions_repo, token_validator)
    progression_service = ProgressionService(
        progression_repo,
        task_bonus_xp=int(setting("TASK_BONUS_XP", DEFAULT_TASK_BONUS_XP)),
        task_cooldown_minutes=int(setting("TASK_COOLDOWN_MINUTES", DEFAULT_TASK_COOLDOWN_MINUTES)),
    )
    attendance_service = AttendanceService(
        attendance_repo,
        session_service,
        progression_service,
        tokens=token_validator,
        geofence=geofence,
        attendance_xp=int(setting("ATTENDANCE_XP", DEFAULT_ATTENDANCE_XP)),
    )
    analytics_service = AttendanceAnalyticsService(attendance_repo)

    return Container(
        attendance_repo=attendance_repo,
        sessions_repo=sessions_repo,
        progression_repo=progression_repo,
        identity_verifier=identity_verifier,
        token_validator=token_validator,
        geofence=geofence,
        session_service=session_service,
        progression_service=progression_service,
        attendance_service=attendance_service,
        analytics_service=analytics_service,
    )


def build_container(*, db_config: dict, settings: Any) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))

    verifier = JWTIdentityVerifier(
        str(getattr(settings, "IDENTITY_JWT_SECRET")),
        algorithms=tuple(getattr(settings, "IDENTITY_JWT_ALGORITHMS", ("HS256",))),
        audience=getattr(settings, "IDENTITY_JWT_AUDIENCE", None),
        issuer=getattr(settings, "IDENTITY_JWT_ISSUER", None),
    )

    return wire_container(
        attendance_repo=MySQLAttendanceRepository(conn),
        sessions_repo=MySQLSessionRepository(conn),
        progression_repo=MySQLProgressionRepository(conn),
        identity_verifier=verifier,
        settings=settings,
    )
