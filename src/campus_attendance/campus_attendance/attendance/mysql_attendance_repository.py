from __future__ import annotations

import logging
from datetime import datetime
from typing import Optional, Sequence

import mysql.connector

from ..core.enums import AttendanceStatus, RecordOutcome
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, is_duplicate_key
from .model import AttendanceRecord
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)

_COLUMNS = """
    session_id, student_id, subject, marked_at, status, institute_id,
    first_name, last_name, roll_no
"""


def _to_record(r: dict) -> AttendanceRecord:
    return AttendanceRecord(
        session_id=str(r["session_id"]),
        student_id=str(r["student_id"]),
        subject=r.get("subject"),
        timestamp=r["marked_at"],
        status=AttendanceStatus(r["status"]),
        institute_id=r.get("institute_id"),
        first_name=r.get("first_name"),
        last_name=r.get("last_name"),
        roll_no=r.get("roll_no"),
    )


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def record(self, record: AttendanceRecord) -> RecordOutcome:
        with db_cursor(self._conn_factory) as (_, cur):
            try:
                cur.execute(
                    f"""
                    INSERT INTO attendance_records({_COLUMNS})
                    VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s)
                    """,
                    (
                        record.session_id,
                        record.student_id,
                        record.subject,
                        record.timestamp,
                        record.status.value,
                        record.institute_id,
                        record.first_name,
                        record.last_name,
                        record.roll_no,
                    ),
                )
            except mysql.connector.IntegrityError as exc:
                if not is_duplicate_key(exc):
                    raise
                return RecordOutcome.ALREADY_RECORDED
            return RecordOutcome.CREATED

    def get_record(self, session_id: str, student_id: str) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM attendance_records WHERE session_id=%s AND student_id=%s",
                (session_id, student_id),
            )
            r = fetchone(cur)
            return _to_record(r) if r else None

    def list_for_session(self, session_id: str) -> Sequence[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM attendance_records WHERE session_id=%s ORDER BY marked_at",
                (session_id,),
            )
            return [_to_record(r) for r in fetchall(cur)]

    def list_timestamps(self, *, institute_id: str, subject: str, since: datetime) -> Sequence[datetime]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT marked_at
                FROM attendance_records
                WHERE institute_id=%s AND subject=%s AND marked_at >= %s
                """,
                (institute_id, subject, since),
            )
            return [r["marked_at"] for r in fetchall(cur)]
