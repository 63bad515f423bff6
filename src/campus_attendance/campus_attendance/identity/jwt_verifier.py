from __future__ import annotations

import logging
from typing import Optional, Sequence

import jwt

from ..core.enums import Role
from ..core.exceptions import AuthenticationError
from .model import Identity
from .verifier import IdentityVerifier

logger = logging.getLogger(__name__)


class JWTIdentityVerifier(IdentityVerifier):
    """Verify ID tokens signed by the external identity provider."""

    def __init__(
        self,
        secret: str,
        *,
        algorithms: Sequence[str] = ("HS256",),
        audience: Optional[str] = None,
        issuer: Optional[str] = None,
    ):
        self._secret = secret
        self._algorithms = list(algorithms)
        self._audience = audience
        self._issuer = issuer

    def verify(self, credential: str) -> Identity:
        if not credential:
            raise AuthenticationError("Missing token")

        try:
            claims = jwt.decode(
                credential,
                self._secret,
                algorithms=self._algorithms,
                audience=self._audience,
                issuer=self._issuer,
                options={"verify_aud": self._audience is not None},
            )
        except jwt.ExpiredSignatureError:
            raise AuthenticationError("Token expired")
        except jwt.PyJWTError as exc:
            logger.info("Rejected bearer token: %s", exc)
            raise AuthenticationError("Invalid token")

        user_id = claims.get("uid") or claims.get("sub")
        if not user_id:
            raise AuthenticationError("Token has no subject")

        try:
            role = Role(claims.get("role") or Role.STUDENT.value)
        except ValueError:
            raise AuthenticationError("Unknown role in token")

        institute_id = claims.get("instituteId")
        return Identity(
            user_id=str(user_id),
            role=role,
            institute_id=str(institute_id) if institute_id else None,
        )
