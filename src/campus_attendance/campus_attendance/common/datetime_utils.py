from __future__ import annotations

from datetime import datetime, timezone


def now_utc() -> datetime:
    """Current UTC time (naive, as stored in MySQL DATETIME columns).

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now(timezone.utc).replace(tzinfo=None)


def now_ms() -> int:
    """Current epoch time in milliseconds."""
    return int(datetime.now(timezone.utc).timestamp() * 1000)
