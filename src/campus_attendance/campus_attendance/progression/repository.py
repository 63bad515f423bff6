from __future__ import annotations

from datetime import datetime
from typing import Iterable, Optional, Protocol

from .model import BonusClaim, StudentProfile


class ProgressionRepository(Protocol):
    def get_profile(self, student_id: str) -> Optional[StudentProfile]:
        raise NotImplementedError

    def create_profile(self, profile: StudentProfile) -> bool:
        """Insert a profile if absent. Returns False when it already exists."""

        raise NotImplementedError

    def add_xp(self, student_id: str, delta: int, *, count_attendance: bool = False) -> int:
        """Atomically add `delta` XP (creating the row if needed); returns the new total."""

        raise NotImplementedError

    def add_badges(self, student_id: str, badge_ids: Iterable[str]) -> None:
        """Grant badges; already-held ids are ignored."""

        raise NotImplementedError

    def claim_bonus(self, student_id: str, delta: int, *, now: datetime, cooldown_start: datetime) -> BonusClaim:
        """Add `delta` XP only if the last award happened at or before `cooldown_start`."""

        raise NotImplementedError
