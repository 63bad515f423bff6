from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from ..core.constants import PROFILE_SCHEMA_VERSION


@dataclass(frozen=True)
class BadgeRule:
    badge_id: str
    threshold: int


@dataclass(frozen=True)
class StudentProfile:
    """Student profile row: identity snapshot plus progression counters.

    Extra attributes live in `extensions`, a small flat mapping checked by
    `validate_extensions`; anything richer needs a new schema version.
    """

    student_id: str
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    roll_no: Optional[str] = None
    institute_id: Optional[str] = None
    department: Optional[str] = None
    xp: int = 0
    attendance_count: int = 0
    last_award_time: Optional[datetime] = None
    badges: frozenset[str] = field(default_factory=frozenset)
    schema_version: int = PROFILE_SCHEMA_VERSION
    extensions: dict = field(default_factory=dict)


@dataclass(frozen=True)
class BonusClaim:
    """Outcome of a cooldown-gated bonus attempt at the storage level."""

    claimed: bool
    new_xp: Optional[int] = None
    last_award_time: Optional[datetime] = None


@dataclass(frozen=True)
class AwardResult:
    xp_awarded: int
    new_xp: int
    new_badges: tuple[str, ...] = ()
