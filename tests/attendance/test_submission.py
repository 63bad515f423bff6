from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from dataclasses import replace

import pytest

from src.campus_attendance.campus_attendance.container import wire_container
from src.campus_attendance.campus_attendance.core.enums import AttendanceStatus, RecordOutcome
from src.campus_attendance.campus_attendance.core.exceptions import (
    GeofenceRejectedError,
    LocationMissingError,
    SessionInactiveError,
    SessionNotFoundError,
    TokenExpiredError,
    TokenFormatError,
    ValidationError,
)
from src.campus_attendance.campus_attendance.identity.jwt_verifier import JWTIdentityVerifier
from src.campus_attendance.campus_attendance.progression.model import StudentProfile

NEARBY = {"latitude": 12.9720, "longitude": 77.5950}
CHENNAI = {"latitude": 13.0827, "longitude": 80.2707}


def _submit(container, now_ms, *, student="st-1", token=None, location=NEARBY, now=None):
    token = token if token is not None else f"S1|{now_ms - 1000}"
    return container.attendance_service.submit(student, token, location, now=now, now_ms=now_ms)


def test_first_submission_creates_record_and_awards_xp(container, attendance_repo, progression_repo, now_ms, fixed_now):
    progression_repo.create_profile(
        StudentProfile(student_id="st-1", first_name="Asha", last_name="Rao", roll_no="CS-001", institute_id="inst-1")
    )

    result = _submit(container, now_ms, now=fixed_now)

    assert result.outcome == RecordOutcome.CREATED
    assert result.xp_awarded == 10
    assert result.new_xp == 10
    assert result.message == "Attendance Marked! +10 XP"

    record = attendance_repo.get_record("S1", "st-1")
    assert record.status == AttendanceStatus.PRESENT
    assert record.subject == "Data Structures"
    assert record.timestamp == fixed_now
    assert (record.first_name, record.last_name, record.roll_no) == ("Asha", "Rao", "CS-001")


def test_duplicate_submission_is_a_no_op(container, attendance_repo, progression_repo, now_ms):
    first = _submit(container, now_ms)
    second = _submit(container, now_ms)

    assert first.outcome == RecordOutcome.CREATED
    assert second.outcome == RecordOutcome.ALREADY_RECORDED
    assert second.xp_awarded == 0
    assert second.message == "Already marked!"
    assert len(attendance_repo.records) == 1
    assert progression_repo.xp_calls == 1
    assert progression_repo.profiles["st-1"].xp == 10
    assert progression_repo.profiles["st-1"].attendance_count == 1


def test_concurrent_duplicates_award_xp_once(container, attendance_repo, progression_repo, now_ms):
    with ThreadPoolExecutor(max_workers=8) as pool:
        results = list(pool.map(lambda _: _submit(container, now_ms), range(16)))

    outcomes = [r.outcome for r in results]
    assert outcomes.count(RecordOutcome.CREATED) == 1
    assert outcomes.count(RecordOutcome.ALREADY_RECORDED) == 15
    assert len(attendance_repo.records) == 1
    assert progression_repo.profiles["st-1"].xp == 10


def test_different_students_each_get_a_record(container, attendance_repo, now_ms):
    _submit(container, now_ms, student="st-1")
    _submit(container, now_ms, student="st-2")

    assert set(attendance_repo.records) == {("S1", "st-1"), ("S1", "st-2")}


def test_expired_token_writes_nothing(container, attendance_repo, progression_repo, now_ms):
    with pytest.raises(TokenExpiredError):
        _submit(container, now_ms, token=f"S1|{now_ms - 20000}")

    assert attendance_repo.records == {}
    assert progression_repo.xp_calls == 0


def test_malformed_token(container, now_ms):
    with pytest.raises(TokenFormatError):
        _submit(container, now_ms, token="|123")


def test_unknown_session_never_creates_record(container, attendance_repo, now_ms):
    with pytest.raises(SessionNotFoundError):
        _submit(container, now_ms, token=f"S404|{now_ms}")

    assert attendance_repo.records == {}


def test_inactive_session_never_creates_record(container, attendance_repo, now_ms):
    container.session_service.end_session("S1")

    with pytest.raises(SessionInactiveError):
        _submit(container, now_ms)

    assert attendance_repo.records == {}


def test_far_device_is_rejected(container, attendance_repo, now_ms):
    with pytest.raises(GeofenceRejectedError) as exc:
        _submit(container, now_ms, location=CHENNAI)

    assert exc.value.distance > 200
    assert attendance_repo.records == {}


def test_missing_device_location_is_rejected(container, attendance_repo, now_ms):
    with pytest.raises(LocationMissingError):
        _submit(container, now_ms, location=None)

    assert attendance_repo.records == {}


def test_session_without_location_fails_closed(container, sessions_repo, live_session, now_ms):
    sessions_repo.add(replace(live_session, session_id="S2", location=None))

    with pytest.raises(LocationMissingError):
        _submit(container, now_ms, token=f"S2|{now_ms}")


def test_location_checks_skipped_when_disabled(sessions_repo, attendance_repo, progression_repo, now_ms):
    class NoGeofence:
        LOCATION_VALIDATION_ENABLED = False

    container = wire_container(
        attendance_repo=attendance_repo,
        sessions_repo=sessions_repo,
        progression_repo=progression_repo,
        identity_verifier=JWTIdentityVerifier("unused-secret-0123456789abcdef0123"),
        settings=NoGeofence,
    )

    result = _submit(container, now_ms, location=CHENNAI)

    assert result.outcome == RecordOutcome.CREATED


def test_hundredth_xp_grants_first_badge_once(container, progression_repo, sessions_repo, live_session, now_ms):
    progression_repo.add_xp("st-1", 90)
    sessions_repo.add(replace(live_session, session_id="S2"))

    first = _submit(container, now_ms, token=f"S1|{now_ms}")
    second = _submit(container, now_ms, token=f"S2|{now_ms}")

    assert first.new_badges == ("novice",)
    assert second.new_badges == ()
    assert second.new_xp == 110
    assert progression_repo.profiles["st-1"].badges == frozenset({"novice"})


def test_rejections_are_logged_with_identifiers(container, now_ms, caplog):
    with caplog.at_level("WARNING"):
        with pytest.raises(SessionNotFoundError):
            _submit(container, now_ms, token=f"S404|{now_ms}")

    assert "session=S404" in caplog.text
    assert "student=st-1" in caplog.text


def test_location_is_not_parsed_when_checks_disabled(sessions_repo, attendance_repo, progression_repo, now_ms):
    class NoGeofence:
        LOCATION_VALIDATION_ENABLED = False

    container = wire_container(
        attendance_repo=attendance_repo,
        sessions_repo=sessions_repo,
        progression_repo=progression_repo,
        identity_verifier=JWTIdentityVerifier("unused-secret-0123456789abcdef0123"),
        settings=NoGeofence,
    )

    result = _submit(container, now_ms, location={"latitude": 512.0, "longitude": 77.59})

    assert result.outcome == RecordOutcome.CREATED


def test_out_of_range_location_rejected_when_checks_enabled(container, attendance_repo, now_ms):
    with pytest.raises(ValidationError):
        _submit(container, now_ms, location={"latitude": 512.0, "longitude": 77.59})

    assert attendance_repo.records == {}
