from __future__ import annotations

import threading
from dataclasses import replace
from datetime import datetime
from typing import Iterable, Optional

import jwt
import pytest

from src.campus_attendance.campus_attendance.attendance.model import AttendanceRecord
from src.campus_attendance.campus_attendance.common.validators import validate_extensions
from src.campus_attendance.campus_attendance.container import wire_container
from src.campus_attendance.campus_attendance.core.enums import RecordOutcome, Role
from src.campus_attendance.campus_attendance.geofence.model import GeoPoint
from src.campus_attendance.campus_attendance.identity.jwt_verifier import JWTIdentityVerifier
from src.campus_attendance.campus_attendance.progression.model import BonusClaim, StudentProfile
from src.campus_attendance.campus_attendance.sessions.model import ClassSession, DepartmentStats

IDENTITY_SECRET = "test-identity-secret-0123456789abcdef"
CLASSROOM = GeoPoint(latitude=12.9716, longitude=77.5946)


class InMemorySessions:
    def __init__(self, sessions: Iterable[ClassSession] = ()):
        self._sessions = {s.session_id: s for s in sessions}
        self.stats: dict[tuple[str, str], int] = {}
        self._lock = threading.Lock()

    def add(self, session: ClassSession) -> None:
        self._sessions[session.session_id] = session

    def get_session(self, session_id: str) -> Optional[ClassSession]:
        return self._sessions.get(session_id)

    def end_session(self, session_id: str, *, ended_at: datetime) -> bool:
        with self._lock:
            s = self._sessions.get(session_id)
            if not s or not s.active:
                return False
            self._sessions[session_id] = replace(s, active=False, ended_at=ended_at)
            if s.institute_id and s.department:
                key = (s.institute_id, s.department)
                self.stats[key] = self.stats.get(key, 0) + 1
            return True

    def get_department_stats(self, institute_id: str, department: str) -> Optional[DepartmentStats]:
        total = self.stats.get((institute_id, department))
        if total is None:
            return None
        return DepartmentStats(institute_id=institute_id, department=department, total_classes=total)


class InMemoryAttendance:
    def __init__(self):
        self.records: dict[tuple[str, str], AttendanceRecord] = {}
        self._lock = threading.Lock()

    def record(self, record: AttendanceRecord) -> RecordOutcome:
        key = (record.session_id, record.student_id)
        with self._lock:
            if key in self.records:
                return RecordOutcome.ALREADY_RECORDED
            self.records[key] = record
            return RecordOutcome.CREATED

    def get_record(self, session_id: str, student_id: str) -> Optional[AttendanceRecord]:
        return self.records.get((session_id, student_id))

    def list_for_session(self, session_id: str):
        return [r for (sid, _), r in self.records.items() if sid == session_id]

    def list_timestamps(self, *, institute_id: str, subject: str, since: datetime):
        return [
            r.timestamp
            for r in self.records.values()
            if r.institute_id == institute_id and r.subject == subject and r.timestamp >= since
        ]


class InMemoryProgression:
    def __init__(self):
        self.profiles: dict[str, StudentProfile] = {}
        self.xp_calls = 0
        self._lock = threading.Lock()

    def get_profile(self, student_id: str) -> Optional[StudentProfile]:
        return self.profiles.get(student_id)

    def create_profile(self, profile: StudentProfile) -> bool:
        validate_extensions(profile.extensions)
        if profile.student_id in self.profiles:
            return False
        self.profiles[profile.student_id] = profile
        return True

    def add_xp(self, student_id: str, delta: int, *, count_attendance: bool = False) -> int:
        with self._lock:
            self.xp_calls += 1
            p = self.profiles.get(student_id) or StudentProfile(student_id=student_id)
            p = replace(p, xp=p.xp + delta, attendance_count=p.attendance_count + (1 if count_attendance else 0))
            self.profiles[student_id] = p
            return p.xp

    def add_badges(self, student_id: str, badge_ids: Iterable[str]) -> None:
        with self._lock:
            p = self.profiles.get(student_id) or StudentProfile(student_id=student_id)
            self.profiles[student_id] = replace(p, badges=p.badges | frozenset(badge_ids))

    def claim_bonus(self, student_id: str, delta: int, *, now: datetime, cooldown_start: datetime) -> BonusClaim:
        with self._lock:
            p = self.profiles.get(student_id) or StudentProfile(student_id=student_id)
            if p.last_award_time is not None and p.last_award_time > cooldown_start:
                return BonusClaim(claimed=False, last_award_time=p.last_award_time)
            p = replace(p, xp=p.xp + delta, last_award_time=now)
            self.profiles[student_id] = p
            return BonusClaim(claimed=True, new_xp=p.xp, last_award_time=now)


class FakeSettings:
    QR_FRESHNESS_WINDOW_MS = 15000
    ALLOW_UNSTAMPED_TOKENS = True
    GEOFENCE_RADIUS_METERS = 200
    LOCATION_VALIDATION_ENABLED = True
    ATTENDANCE_XP = 10
    TASK_BONUS_XP = 50
    TASK_COOLDOWN_MINUTES = 15


@pytest.fixture
def fixed_now() -> datetime:
    return datetime(2026, 2, 2, 9, 0, 0)


@pytest.fixture
def now_ms() -> int:
    return 1_770_000_000_000


@pytest.fixture
def live_session() -> ClassSession:
    return ClassSession(
        session_id="S1",
        active=True,
        subject="Data Structures",
        institute_id="inst-1",
        department="CSE",
        location=CLASSROOM,
    )


@pytest.fixture
def sessions_repo(live_session) -> InMemorySessions:
    return InMemorySessions([live_session])


@pytest.fixture
def attendance_repo() -> InMemoryAttendance:
    return InMemoryAttendance()


@pytest.fixture
def progression_repo() -> InMemoryProgression:
    return InMemoryProgression()


@pytest.fixture
def container(sessions_repo, attendance_repo, progression_repo):
    return wire_container(
        attendance_repo=attendance_repo,
        sessions_repo=sessions_repo,
        progression_repo=progression_repo,
        identity_verifier=JWTIdentityVerifier(IDENTITY_SECRET),
        settings=FakeSettings,
    )


def sign_identity_token(secret: str, *, user_id: str, role: Role = Role.STUDENT, institute_id: Optional[str] = None) -> str:
    """Sign a token the way the identity provider does."""

    claims = {"sub": user_id, "role": role.value}
    if institute_id:
        claims["instituteId"] = institute_id
    return jwt.encode(claims, secret, algorithm="HS256")


@pytest.fixture
def issue_token():
    return sign_identity_token
