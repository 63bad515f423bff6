from __future__ import annotations

from typing import Protocol

from .model import Identity


class IdentityVerifier(Protocol):
    """Turns a bearer credential into an identity.

    Implementations raise AuthenticationError for bad credentials and
    DependencyError when the identity provider cannot be reached.
    """

    def verify(self, credential: str) -> Identity:
        raise NotImplementedError
