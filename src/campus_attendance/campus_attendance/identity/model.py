from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..core.enums import Role


@dataclass(frozen=True)
class Identity:
    """Caller identity resolved from a bearer credential."""

    user_id: str
    role: Role = Role.STUDENT
    institute_id: Optional[str] = None
