from __future__ import annotations

import logging
from datetime import datetime, timedelta
from typing import Any, Optional

from ..common.datetime_utils import now_ms as current_ms
from ..common.datetime_utils import now_utc
from ..common.validators import require_non_empty
from ..core.constants import ANALYTICS_WINDOW_DAYS, DEFAULT_ATTENDANCE_XP, WEEKDAY_LABELS
from ..core.enums import RecordOutcome
from ..core.exceptions import DomainError
from ..geofence.service import GeofenceValidator, parse_location
from ..progression.service import ProgressionService
from ..sessions.service import SessionService
from ..tokens.service import RotatingTokenValidator
from .model import AttendanceRecord, SubmissionResult
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)


class AttendanceService:
    """Turns a verified student's scan into exactly one attendance record.

    Order of checks: token, session, location, ledger, progression. The
    ledger write is the only commit point before progression; XP and badges
    are only touched when that write created the record.
    """

    def __init__(
        self,
        attendance: AttendanceRepository,
        sessions: SessionService,
        progression: ProgressionService,
        *,
        tokens: RotatingTokenValidator,
        geofence: GeofenceValidator,
        attendance_xp: int = DEFAULT_ATTENDANCE_XP,
    ):
        self._attendance = attendance
        self._sessions = sessions
        self._progression = progression
        self._tokens = tokens
        self._geofence = geofence
        self._attendance_xp = int(attendance_xp)

    def submit(
        self,
        student_id: str,
        raw_token: Optional[str],
        location: Any = None,
        *,
        now: Optional[datetime] = None,
        now_ms: Optional[int] = None,
    ) -> SubmissionResult:
        session_id = None
        try:
            token = self._tokens.validate(raw_token, now_ms=current_ms() if now_ms is None else now_ms)
            session_id = token.session_id

            session = self._sessions.get_active(session_id)
            if self._geofence.enabled:
                self._geofence.check(session.location, parse_location(location))

            profile = self._progression.get_profile(student_id)
            outcome = self._attendance.record(
                AttendanceRecord(
                    session_id=session.session_id,
                    student_id=student_id,
                    subject=session.subject,
                    timestamp=now or now_utc(),
                    institute_id=profile.institute_id or session.institute_id,
                    first_name=profile.first_name,
                    last_name=profile.last_name,
                    roll_no=profile.roll_no,
                )
            )
        except DomainError as e:
            logger.warning(
                "Attendance rejected session=%s student=%s reason=%s: %s",
                session_id or "-",
                student_id,
                type(e).__name__,
                e,
            )
            raise

        if outcome == RecordOutcome.ALREADY_RECORDED:
            logger.info("Attendance already recorded session=%s student=%s", session_id, student_id)
            return SubmissionResult(outcome=outcome, session_id=session_id, student_id=student_id)

        logger.info("Attendance recorded session=%s student=%s", session_id, student_id)
        try:
            award = self._progression.award(student_id, self._attendance_xp, count_attendance=True)
        except DomainError:
            # The record is committed; a retry reports already_recorded and awards nothing.
            logger.error("XP award failed after recording session=%s student=%s", session_id, student_id)
            raise

        return SubmissionResult(
            outcome=outcome,
            session_id=session_id,
            student_id=student_id,
            xp_awarded=award.xp_awarded,
            new_xp=award.new_xp,
            new_badges=award.new_badges,
        )

    def list_for_session(self, session_id: str):
        return self._attendance.list_for_session(session_id)


class AttendanceAnalyticsService:
    def __init__(self, attendance: AttendanceRepository):
        self._attendance = attendance

    def weekly_chart(self, *, institute_id: str, subject: str, now: Optional[datetime] = None) -> list[dict]:
        """Present counts per weekday over the last seven days."""

        institute_id = require_non_empty(institute_id, "instituteId")
        subject = require_non_empty(subject, "subject")
        now = now or now_utc()

        counts = {label: 0 for label in WEEKDAY_LABELS}
        since = now - timedelta(days=ANALYTICS_WINDOW_DAYS)
        for ts in self._attendance.list_timestamps(institute_id=institute_id, subject=subject, since=since):
            counts[WEEKDAY_LABELS[ts.weekday()]] += 1

        return [{"name": label, "present": counts[label]} for label in WEEKDAY_LABELS]
