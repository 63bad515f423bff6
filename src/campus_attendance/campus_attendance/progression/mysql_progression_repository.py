from __future__ import annotations

import json
from datetime import datetime
from typing import Iterable, Optional

from ..common.validators import validate_extensions
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import BonusClaim, StudentProfile
from .repository import ProgressionRepository


class MySQLProgressionRepository(ProgressionRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_profile(self, student_id: str) -> Optional[StudentProfile]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT student_id, first_name, last_name, roll_no, institute_id, department,
                       xp, attendance_count, last_award_time, schema_version, extensions
                FROM student_profiles
                WHERE student_id=%s
                """,
                (student_id,),
            )
            r = fetchone(cur)
            if not r:
                return None

            cur.execute("SELECT badge_id FROM student_badges WHERE student_id=%s", (student_id,))
            badges = frozenset(row["badge_id"] for row in fetchall(cur))

            extensions = r.get("extensions")
            if isinstance(extensions, (bytes, str)):
                extensions = json.loads(extensions or "{}")

            return StudentProfile(
                student_id=str(r["student_id"]),
                first_name=r.get("first_name"),
                last_name=r.get("last_name"),
                roll_no=r.get("roll_no"),
                institute_id=r.get("institute_id"),
                department=r.get("department"),
                xp=int(r.get("xp") or 0),
                attendance_count=int(r.get("attendance_count") or 0),
                last_award_time=r.get("last_award_time"),
                badges=badges,
                schema_version=int(r.get("schema_version") or 1),
                extensions=extensions or {},
            )

    def create_profile(self, profile: StudentProfile) -> bool:
        extensions = validate_extensions(profile.extensions)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT IGNORE INTO student_profiles(
                    student_id, first_name, last_name, roll_no, institute_id, department,
                    xp, attendance_count, schema_version, extensions
                )
                VALUES(%s,%s,%s,%s,%s,%s,0,0,%s,%s)
                """,
                (
                    profile.student_id,
                    profile.first_name,
                    profile.last_name,
                    profile.roll_no,
                    profile.institute_id,
                    profile.department,
                    profile.schema_version,
                    json.dumps(extensions),
                ),
            )
            return cur.rowcount > 0

    def add_xp(self, student_id: str, delta: int, *, count_attendance: bool = False) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO student_profiles(student_id, xp, attendance_count)
                VALUES(%s,%s,%s)
                ON DUPLICATE KEY UPDATE
                    xp = xp + VALUES(xp),
                    attendance_count = attendance_count + VALUES(attendance_count)
                """,
                (student_id, int(delta), 1 if count_attendance else 0),
            )
            cur.execute("SELECT xp FROM student_profiles WHERE student_id=%s", (student_id,))
            r = fetchone(cur)
            return int(r["xp"]) if r else int(delta)

    def add_badges(self, student_id: str, badge_ids: Iterable[str]) -> None:
        rows = [(student_id, badge_id) for badge_id in badge_ids]
        if not rows:
            return
        with db_cursor(self._conn_factory) as (_, cur):
            cur.executemany(
                "INSERT IGNORE INTO student_badges(student_id, badge_id) VALUES(%s,%s)",
                rows,
            )

    def claim_bonus(self, student_id: str, delta: int, *, now: datetime, cooldown_start: datetime) -> BonusClaim:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("INSERT IGNORE INTO student_profiles(student_id) VALUES(%s)", (student_id,))
            cur.execute(
                """
                UPDATE student_profiles
                SET xp = xp + %s, last_award_time=%s
                WHERE student_id=%s AND (last_award_time IS NULL OR last_award_time <= %s)
                """,
                (int(delta), now, student_id, cooldown_start),
            )
            claimed = cur.rowcount > 0

            cur.execute("SELECT xp, last_award_time FROM student_profiles WHERE student_id=%s", (student_id,))
            r = fetchone(cur) or {}
            return BonusClaim(
                claimed=claimed,
                new_xp=int(r.get("xp") or 0) if claimed else None,
                last_award_time=r.get("last_award_time"),
            )
