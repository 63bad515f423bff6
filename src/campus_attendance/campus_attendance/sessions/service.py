from __future__ import annotations

import logging
from datetime import datetime
from typing import Optional

from ..common.datetime_utils import now_utc
from ..common.validators import require_non_empty
from ..core.exceptions import SessionInactiveError, SessionNotFoundError
from ..tokens.service import RotatingTokenValidator
from .model import ClassSession, DepartmentStats
from .repository import SessionRepository

logger = logging.getLogger(__name__)


class SessionService:
    """Use cases around live class sessions."""

    def __init__(self, sessions: SessionRepository, tokens: RotatingTokenValidator):
        self._sessions = sessions
        self._tokens = tokens

    def get_session(self, session_id: str) -> ClassSession:
        session = self._sessions.get_session(session_id)
        if not session:
            raise SessionNotFoundError("Session not found")
        return session

    def get_active(self, session_id: str) -> ClassSession:
        session = self.get_session(session_id)
        if not session.active:
            raise SessionInactiveError("Session not active")
        return session

    def end_session(self, session_id: str, *, now: Optional[datetime] = None) -> bool:
        session_id = require_non_empty(session_id, "sessionId")
        self.get_session(session_id)

        ended = self._sessions.end_session(session_id, ended_at=now or now_utc())
        if ended:
            logger.info("Session ended session=%s", session_id)
        else:
            logger.info("Session already ended session=%s", session_id)
        return ended

    def issue_qr(self, session_id: str, *, now_ms: Optional[int] = None) -> dict:
        session = self.get_active(session_id)
        return self._tokens.issue_qr(session.session_id, now_ms=now_ms)

    def department_stats(self, institute_id: str, department: str) -> DepartmentStats:
        stats = self._sessions.get_department_stats(institute_id, department)
        return stats or DepartmentStats(institute_id=institute_id, department=department, total_classes=0)
