from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class GeoPoint:
    """A point in degrees."""

    latitude: float
    longitude: float


@dataclass(frozen=True)
class GeofenceDecision:
    accepted: bool
    distance_m: Optional[float] = None
