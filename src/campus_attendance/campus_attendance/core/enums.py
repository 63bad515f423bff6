from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """Roles carried in the identity provider's claims."""

    STUDENT = "student"
    INSTRUCTOR = "instructor"
    ADMIN = "admin"


class AttendanceStatus(str, Enum):
    """Status stored on attendance records."""

    PRESENT = "Present"


class RecordOutcome(str, Enum):
    """Result of an attendance ledger write."""

    CREATED = "created"
    ALREADY_RECORDED = "already_recorded"
