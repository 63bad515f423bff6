import pytest

from src.campus_attendance.campus_attendance.core.exceptions import (
    GeofenceRejectedError,
    LocationMissingError,
    ValidationError,
)
from src.campus_attendance.campus_attendance.geofence.model import GeoPoint
from src.campus_attendance.campus_attendance.geofence.service import (
    GeofenceValidator,
    haversine_distance,
    parse_location,
)

CLASSROOM = GeoPoint(12.9716, 77.5946)
NEARBY = GeoPoint(12.9720, 77.5950)
CHENNAI = GeoPoint(13.0827, 80.2707)


def test_haversine_short_distance():
    distance = haversine_distance(CLASSROOM, NEARBY)

    assert 50 < distance < 70


def test_haversine_long_distance():
    distance = haversine_distance(CLASSROOM, CHENNAI)

    assert 280_000 < distance < 300_000


def test_haversine_same_point_is_zero():
    assert haversine_distance(CLASSROOM, CLASSROOM) == pytest.approx(0.0)


def test_nearby_device_is_accepted():
    decision = GeofenceValidator(radius_m=200).check(CLASSROOM, NEARBY)

    assert decision.accepted
    assert decision.distance_m < 200


def test_far_device_is_rejected_with_rounded_distance():
    with pytest.raises(GeofenceRejectedError) as exc:
        GeofenceValidator(radius_m=200).check(CLASSROOM, CHENNAI)

    assert isinstance(exc.value.distance, int)
    assert 280_000 < exc.value.distance < 300_000
    assert exc.value.to_payload()["distance"] == exc.value.distance


@pytest.mark.parametrize("classroom, device", [(CLASSROOM, None), (None, NEARBY), (None, None)])
def test_missing_point_fails_when_enabled(classroom, device):
    with pytest.raises(LocationMissingError):
        GeofenceValidator().check(classroom, device)


def test_disabled_validation_accepts_anything():
    validator = GeofenceValidator(enabled=False)

    assert validator.check(CLASSROOM, CHENNAI).accepted
    assert validator.check(None, None).accepted


def test_parse_location_variants():
    assert parse_location({"latitude": 12.9, "longitude": 77.5}) == GeoPoint(12.9, 77.5)
    assert parse_location({"lat": "12.9", "lon": "77.5"}) == GeoPoint(12.9, 77.5)
    assert parse_location(None) is None
    assert parse_location({"latitude": 12.9}) is None
    assert parse_location({"latitude": "north", "longitude": 1}) is None


def test_parse_location_rejects_out_of_range():
    with pytest.raises(ValidationError):
        parse_location({"latitude": 123.0, "longitude": 77.5})
