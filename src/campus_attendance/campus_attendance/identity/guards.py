from __future__ import annotations

import logging
from functools import wraps
from typing import Iterable

from flask import g, jsonify, request

from ..core.enums import Role
from ..core.exceptions import AuthenticationError, AuthorizationError, DomainError
from .verifier import IdentityVerifier

logger = logging.getLogger(__name__)

BEARER_PREFIX = "Bearer "


def bearer_credential() -> str:
    header = request.headers.get("Authorization", "")
    if not header.startswith(BEARER_PREFIX):
        raise AuthenticationError("Missing token")
    credential = header[len(BEARER_PREFIX):].strip()
    if not credential:
        raise AuthenticationError("Missing token")
    return credential


def make_bearer_required(verifier: IdentityVerifier):
    """Build a decorator that resolves the caller into `flask.g.identity`."""

    def bearer_required(*roles: Role):
        allowed: Iterable[Role] = roles

        def decorator(view):
            @wraps(view)
            def wrapper(*args, **kwargs):
                try:
                    identity = verifier.verify(bearer_credential())
                    if allowed and identity.role not in allowed:
                        raise AuthorizationError("Not allowed for this role")
                except DomainError as e:
                    logger.warning("Rejected %s %s: %s", request.method, request.path, e)
                    return jsonify(e.to_payload()), e.status_code
                g.identity = identity
                return view(*args, **kwargs)

            return wrapper

        return decorator

    return bearer_required
