import time

import jwt
import pytest

from src.campus_attendance.campus_attendance.core.enums import Role
from src.campus_attendance.campus_attendance.core.exceptions import AuthenticationError
from src.campus_attendance.campus_attendance.identity.jwt_verifier import JWTIdentityVerifier

SECRET = "identity-secret-0123456789abcdef0123"


def test_valid_token_resolves_identity(issue_token):
    token = issue_token(SECRET, user_id="st-1", institute_id="inst-1")

    identity = JWTIdentityVerifier(SECRET).verify(token)

    assert identity.user_id == "st-1"
    assert identity.role == Role.STUDENT
    assert identity.institute_id == "inst-1"


def test_uid_claim_is_accepted():
    token = jwt.encode({"uid": "st-2", "role": "instructor"}, SECRET, algorithm="HS256")

    identity = JWTIdentityVerifier(SECRET).verify(token)

    assert identity.user_id == "st-2"
    assert identity.role == Role.INSTRUCTOR


def test_wrong_secret_is_rejected(issue_token):
    token = issue_token("other-secret-0123456789abcdef012345", user_id="st-1")

    with pytest.raises(AuthenticationError):
        JWTIdentityVerifier(SECRET).verify(token)


def test_expired_token_is_rejected():
    token = jwt.encode({"sub": "st-1", "exp": int(time.time()) - 60}, SECRET, algorithm="HS256")

    with pytest.raises(AuthenticationError):
        JWTIdentityVerifier(SECRET).verify(token)


@pytest.mark.parametrize("credential", ["", "not-a-jwt"])
def test_garbage_is_rejected(credential):
    with pytest.raises(AuthenticationError):
        JWTIdentityVerifier(SECRET).verify(credential)


def test_token_without_subject_is_rejected():
    token = jwt.encode({"role": "student"}, SECRET, algorithm="HS256")

    with pytest.raises(AuthenticationError):
        JWTIdentityVerifier(SECRET).verify(token)


def test_unknown_role_is_rejected():
    token = jwt.encode({"sub": "x", "role": "janitor"}, SECRET, algorithm="HS256")

    with pytest.raises(AuthenticationError):
        JWTIdentityVerifier(SECRET).verify(token)
