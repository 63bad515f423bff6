from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class RotatingToken:
    """Value decoded from a scanned rotating QR code. Never persisted."""

    session_id: str
    issued_at_ms: Optional[int] = None

    @property
    def is_stamped(self) -> bool:
        return self.issued_at_ms is not None
