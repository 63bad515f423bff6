from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol

from .model import ClassSession, DepartmentStats


class SessionRepository(Protocol):
    """Source of truth for class sessions and department class counters."""

    def get_session(self, session_id: str) -> Optional[ClassSession]:
        raise NotImplementedError

    def end_session(self, session_id: str, *, ended_at: datetime) -> bool:
        """Flip active -> inactive.

        Returns True only for the call that performed the transition; that
        call also increments the department counter, atomically with it.
        """

        raise NotImplementedError

    def get_department_stats(self, institute_id: str, department: str) -> Optional[DepartmentStats]:
        raise NotImplementedError
