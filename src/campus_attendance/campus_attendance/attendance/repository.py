from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import RecordOutcome
from .model import AttendanceRecord


class AttendanceRepository(Protocol):
    """The attendance ledger, keyed by (session_id, student_id)."""

    def record(self, record: AttendanceRecord) -> RecordOutcome:
        """Create the record if absent, as one atomic write.

        Returns ALREADY_RECORDED without touching anything when a record for
        the same key exists.
        """

        raise NotImplementedError

    def get_record(self, session_id: str, student_id: str) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def list_for_session(self, session_id: str) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def list_timestamps(self, *, institute_id: str, subject: str, since: datetime) -> Sequence[datetime]:
        raise NotImplementedError
