from __future__ import annotations

from typing import Iterable, Sequence

from .model import BadgeRule

# Ordered by threshold.
BADGE_RULES: tuple[BadgeRule, ...] = (
    BadgeRule("novice", 100),
    BadgeRule("enthusiast", 500),
    BadgeRule("expert", 1000),
    BadgeRule("master", 2000),
)


def evaluate_badges(new_xp: int, current_badges: Iterable[str], rules: Sequence[BadgeRule] = BADGE_RULES) -> list[str]:
    """Return the badge ids earned at `new_xp` that are not held yet."""

    held = set(current_badges or ())
    return [rule.badge_id for rule in rules if new_xp >= rule.threshold and rule.badge_id not in held]
