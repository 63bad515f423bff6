from __future__ import annotations

import base64
import io
import logging
from typing import Optional

import qrcode

from ..common.datetime_utils import now_ms as current_ms
from ..core.constants import DEFAULT_FRESHNESS_WINDOW_MS, TOKEN_SEPARATOR
from ..core.exceptions import TokenExpiredError, TokenFormatError
from .model import RotatingToken

logger = logging.getLogger(__name__)


def parse_token(raw: Optional[str]) -> RotatingToken:
    """Split `"<sessionId>|<issuedAtMs>"` into its parts.

    The separator and timestamp are optional together: a bare session id is a
    legacy code, but a separator with nothing after it is malformed.
    """

    if not isinstance(raw, str):
        raise TokenFormatError("Invalid QR code")

    session_part, sep, stamp_part = raw.partition(TOKEN_SEPARATOR)
    session_id = session_part.strip()
    if not session_id:
        raise TokenFormatError("Invalid QR code")

    if not sep:
        return RotatingToken(session_id=session_id)
    if not stamp_part.strip():
        raise TokenFormatError("Invalid QR code timestamp")

    try:
        issued_at_ms = int(stamp_part.strip())
    except ValueError:
        raise TokenFormatError("Invalid QR code timestamp")
    return RotatingToken(session_id=session_id, issued_at_ms=issued_at_ms)


def render_qr_png(code: str) -> bytes:
    img = qrcode.make(code)
    buf = io.BytesIO()
    img.save(buf, format="PNG")
    return buf.getvalue()


class RotatingTokenValidator:
    """Freshness check for rotating QR codes (and the matching issuer)."""

    def __init__(self, *, freshness_window_ms: int = DEFAULT_FRESHNESS_WINDOW_MS, allow_unstamped: bool = True):
        self._window_ms = int(freshness_window_ms)
        self._allow_unstamped = bool(allow_unstamped)

    @property
    def freshness_window_ms(self) -> int:
        return self._window_ms

    def validate(self, raw: Optional[str], *, now_ms: Optional[int] = None) -> RotatingToken:
        token = parse_token(raw)

        if not token.is_stamped:
            if not self._allow_unstamped:
                raise TokenFormatError("QR code has no timestamp")
            logger.warning("Accepted unstamped QR code session=%s (no freshness check)", token.session_id)
            return token

        now_ms = current_ms() if now_ms is None else int(now_ms)
        age_ms = now_ms - token.issued_at_ms
        if age_ms > self._window_ms:
            raise TokenExpiredError("QR code expired, scan the latest code")
        return token

    def issue(self, session_id: str, *, now_ms: Optional[int] = None) -> str:
        now_ms = current_ms() if now_ms is None else int(now_ms)
        return f"{session_id}{TOKEN_SEPARATOR}{now_ms}"

    def issue_qr(self, session_id: str, *, now_ms: Optional[int] = None) -> dict:
        code = self.issue(session_id, now_ms=now_ms)
        qr_b64 = base64.b64encode(render_qr_png(code)).decode("utf-8")
        return {"code": code, "qr": qr_b64, "expiresIn": self._window_ms // 1000}
