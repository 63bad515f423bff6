from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..geofence.model import GeoPoint


@dataclass(frozen=True)
class ClassSession:
    """A live class session students can mark attendance against."""

    session_id: str
    active: bool
    subject: Optional[str]
    institute_id: Optional[str]
    department: Optional[str]
    location: Optional[GeoPoint] = None
    created_at: Optional[datetime] = None
    ended_at: Optional[datetime] = None


@dataclass(frozen=True)
class DepartmentStats:
    institute_id: str
    department: str
    total_classes: int
