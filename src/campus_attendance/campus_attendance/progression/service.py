from __future__ import annotations

import logging
import math
from datetime import datetime, timedelta
from typing import Iterable, Optional

from ..common.datetime_utils import now_utc
from ..common.validators import require_non_empty, require_non_negative_int
from ..core.constants import DEFAULT_TASK_BONUS_XP, DEFAULT_TASK_COOLDOWN_MINUTES
from ..core.exceptions import CooldownActiveError
from .model import AwardResult, StudentProfile
from .repository import ProgressionRepository
from .rules import BADGE_RULES, evaluate_badges

logger = logging.getLogger(__name__)


class ProgressionService:
    """XP accumulation and badge thresholds.

    XP only ever grows and badges are only ever added, so every operation
    here can be repeated without undoing earlier results.
    """

    def __init__(
        self,
        progression: ProgressionRepository,
        *,
        rules=BADGE_RULES,
        task_bonus_xp: int = DEFAULT_TASK_BONUS_XP,
        task_cooldown_minutes: int = DEFAULT_TASK_COOLDOWN_MINUTES,
    ):
        self._progression = progression
        self._rules = tuple(rules)
        self._task_bonus_xp = int(task_bonus_xp)
        self._cooldown = timedelta(minutes=int(task_cooldown_minutes))

    def award_xp(self, student_id: str, delta: int, *, count_attendance: bool = False) -> int:
        delta = require_non_negative_int(delta, "XP")
        return self._progression.add_xp(student_id, delta, count_attendance=count_attendance)

    def evaluate_badges(self, new_xp: int, current_badges: Iterable[str]) -> list[str]:
        return evaluate_badges(new_xp, current_badges, self._rules)

    def evaluate_and_grant(self, student_id: str, new_xp: int, current_badges: Optional[Iterable[str]] = None) -> list[str]:
        if current_badges is None:
            profile = self._progression.get_profile(student_id)
            current_badges = profile.badges if profile else ()

        granted = self.evaluate_badges(new_xp, current_badges)
        if granted:
            self._progression.add_badges(student_id, granted)
            logger.info("Badges granted student=%s badges=%s xp=%s", student_id, ",".join(granted), new_xp)
        return granted

    def award(self, student_id: str, delta: int, *, count_attendance: bool = False) -> AwardResult:
        """Add XP, then grant whatever badges the new total unlocks."""

        before = self._progression.get_profile(student_id)
        new_xp = self.award_xp(student_id, delta, count_attendance=count_attendance)
        new_badges = self.evaluate_and_grant(student_id, new_xp, before.badges if before else ())
        return AwardResult(xp_awarded=delta, new_xp=new_xp, new_badges=tuple(new_badges))

    def claim_task_bonus(self, student_id: str, *, now: Optional[datetime] = None) -> AwardResult:
        """Cooldown-gated bonus, unrelated to attendance."""

        student_id = require_non_empty(student_id, "uid")
        now = now or now_utc()

        before = self._progression.get_profile(student_id)
        claim = self._progression.claim_bonus(
            student_id,
            self._task_bonus_xp,
            now=now,
            cooldown_start=now - self._cooldown,
        )
        if not claim.claimed:
            remaining = self._cooldown.total_seconds()
            if claim.last_award_time is not None:
                remaining = (claim.last_award_time + self._cooldown - now).total_seconds()
            remaining_seconds = max(1, math.ceil(remaining))
            logger.info("Task bonus on cooldown student=%s remaining=%ss", student_id, remaining_seconds)
            raise CooldownActiveError(remaining_seconds)

        new_badges = self.evaluate_and_grant(student_id, claim.new_xp, before.badges if before else ())
        logger.info("Task bonus awarded student=%s xp=%s", student_id, claim.new_xp)
        return AwardResult(xp_awarded=self._task_bonus_xp, new_xp=claim.new_xp, new_badges=tuple(new_badges))

    def get_profile(self, student_id: str) -> StudentProfile:
        return self._progression.get_profile(student_id) or StudentProfile(student_id=student_id)

    def get_summary(self, student_id: str) -> dict:
        profile = self.get_profile(student_id)
        return {
            "studentId": profile.student_id,
            "xp": profile.xp,
            "attendanceCount": profile.attendance_count,
            "badges": [rule.badge_id for rule in self._rules if rule.badge_id in profile.badges],
        }
