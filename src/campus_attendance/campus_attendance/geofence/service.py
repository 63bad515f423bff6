from __future__ import annotations

import logging
import math
from typing import Any, Optional

from ..core.constants import DEFAULT_GEOFENCE_RADIUS_METERS, EARTH_RADIUS_METERS
from ..core.exceptions import GeofenceRejectedError, LocationMissingError, ValidationError
from .model import GeofenceDecision, GeoPoint

logger = logging.getLogger(__name__)


def haversine_distance(a: GeoPoint, b: GeoPoint) -> float:
    """Great-circle distance between two points, in meters."""

    lat1 = math.radians(a.latitude)
    lat2 = math.radians(b.latitude)
    d_lat = math.radians(b.latitude - a.latitude)
    d_lon = math.radians(b.longitude - a.longitude)

    h = math.sin(d_lat / 2) ** 2 + math.cos(lat1) * math.cos(lat2) * math.sin(d_lon / 2) ** 2
    return EARTH_RADIUS_METERS * 2 * math.atan2(math.sqrt(h), math.sqrt(1 - h))


def parse_location(payload: Any) -> Optional[GeoPoint]:
    """Read `{latitude, longitude}` (or `lat`/`lon`) from a JSON payload.

    Returns None when the payload carries no usable location.
    """

    if not isinstance(payload, dict):
        return None

    lat = payload.get("latitude", payload.get("lat"))
    lon = payload.get("longitude", payload.get("lon", payload.get("lng")))
    if lat is None or lon is None or isinstance(lat, bool) or isinstance(lon, bool):
        return None

    try:
        lat_f = float(lat)
        lon_f = float(lon)
    except (TypeError, ValueError):
        return None

    if not (-90.0 <= lat_f <= 90.0) or not (-180.0 <= lon_f <= 180.0):
        raise ValidationError("Location coordinates out of range")
    return GeoPoint(latitude=lat_f, longitude=lon_f)


class GeofenceValidator:
    def __init__(self, *, radius_m: float = DEFAULT_GEOFENCE_RADIUS_METERS, enabled: bool = True):
        self._radius_m = float(radius_m)
        self._enabled = bool(enabled)
        if not self._enabled:
            logger.warning("Location validation is DISABLED by configuration; geofence checks are skipped")

    @property
    def enabled(self) -> bool:
        return self._enabled

    @property
    def radius_m(self) -> float:
        return self._radius_m

    def check(self, classroom: Optional[GeoPoint], device: Optional[GeoPoint]) -> GeofenceDecision:
        if not self._enabled:
            return GeofenceDecision(accepted=True)

        if classroom is None:
            raise LocationMissingError("Class location is not set for this session")
        if device is None:
            raise LocationMissingError("Device location is required")

        distance = haversine_distance(classroom, device)
        if distance > self._radius_m:
            raise GeofenceRejectedError(distance=round(distance), radius=self._radius_m)
        return GeofenceDecision(accepted=True, distance_m=distance)
