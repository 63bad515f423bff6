from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import AttendanceStatus, RecordOutcome


@dataclass(frozen=True)
class AttendanceRecord:
    """One record per (session, student). Immutable once written."""

    session_id: str
    student_id: str
    subject: Optional[str]
    timestamp: datetime
    status: AttendanceStatus = AttendanceStatus.PRESENT
    institute_id: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    roll_no: Optional[str] = None


@dataclass(frozen=True)
class SubmissionResult:
    outcome: RecordOutcome
    session_id: str
    student_id: str
    xp_awarded: int = 0
    new_xp: Optional[int] = None
    new_badges: tuple[str, ...] = ()

    @property
    def message(self) -> str:
        if self.outcome == RecordOutcome.ALREADY_RECORDED:
            return "Already marked!"
        return f"Attendance Marked! +{self.xp_awarded} XP"

    def to_payload(self) -> dict:
        return {
            "message": self.message,
            "status": self.outcome.value,
            "sessionId": self.session_id,
            "xpAwarded": self.xp_awarded,
            "newBadges": list(self.new_badges),
        }
