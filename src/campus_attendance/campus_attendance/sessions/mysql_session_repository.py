from __future__ import annotations

from datetime import datetime
from typing import Optional

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchone
from ..geofence.model import GeoPoint
from .model import ClassSession, DepartmentStats
from .repository import SessionRepository


def _to_session(r: dict) -> ClassSession:
    location = None
    if r.get("latitude") is not None and r.get("longitude") is not None:
        location = GeoPoint(latitude=float(r["latitude"]), longitude=float(r["longitude"]))
    return ClassSession(
        session_id=str(r["session_id"]),
        active=bool(r["is_active"]),
        subject=r.get("subject"),
        institute_id=r.get("institute_id"),
        department=r.get("department"),
        location=location,
        created_at=r.get("created_at"),
        ended_at=r.get("ended_at"),
    )


class MySQLSessionRepository(SessionRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_session(self, session_id: str) -> Optional[ClassSession]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT session_id, is_active, subject, institute_id, department,
                       latitude, longitude, created_at, ended_at
                FROM class_sessions
                WHERE session_id=%s
                """,
                (session_id,),
            )
            r = fetchone(cur)
            return _to_session(r) if r else None

    def end_session(self, session_id: str, *, ended_at: datetime) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE class_sessions
                SET is_active=0, ended_at=%s
                WHERE session_id=%s AND is_active=1
                """,
                (ended_at, session_id),
            )
            if cur.rowcount == 0:
                return False

            cur.execute(
                "SELECT institute_id, department FROM class_sessions WHERE session_id=%s",
                (session_id,),
            )
            r = fetchone(cur)
            if r and r.get("institute_id") and r.get("department"):
                cur.execute(
                    """
                    INSERT INTO department_stats(institute_id, department, total_classes)
                    VALUES(%s,%s,1)
                    ON DUPLICATE KEY UPDATE total_classes = total_classes + 1
                    """,
                    (r["institute_id"], r["department"]),
                )
            return True

    def get_department_stats(self, institute_id: str, department: str) -> Optional[DepartmentStats]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT institute_id, department, total_classes
                FROM department_stats
                WHERE institute_id=%s AND department=%s
                """,
                (institute_id, department),
            )
            r = fetchone(cur)
            if not r:
                return None
            return DepartmentStats(
                institute_id=r["institute_id"],
                department=r["department"],
                total_classes=int(r["total_classes"]),
            )
