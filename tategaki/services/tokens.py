"""Signed, self-contained session tokens.

A token is ``base64url(payload) + "." + hex(hmac_sha256(secret, segment))``
where ``payload`` is compact JSON ``{"exp": <epoch ms>, "sub": <subject>}``.
"""

import base64
import binascii
import hashlib
import hmac
import json
from dataclasses import dataclass

from tategaki.clock import now_ms
from tategaki.errors import ConfigurationError, TokenError


@dataclass(frozen=True)
class SessionPayload:
    subject_id: str
    expires_at: int


def _b64url_encode(raw: bytes) -> str:
    return base64.urlsafe_b64encode(raw).decode("ascii").rstrip("=")


def _b64url_decode(value: str) -> bytes:
    padding = "=" * (-len(value) % 4)
    return base64.urlsafe_b64decode((value + padding).encode("ascii"))


class TokenCodec:
    def __init__(self, secret: str) -> None:
        if not secret:
            raise ConfigurationError("Session signing secret is not configured")
        self._secret = secret.encode("utf-8")

    def encode(self, payload: SessionPayload) -> str:
        body = json.dumps(
            {"exp": payload.expires_at, "sub": payload.subject_id},
            separators=(",", ":"),
            sort_keys=True,
        ).encode("utf-8")
        segment = _b64url_encode(body)
        return f"{segment}.{self._sign(segment)}"

    def decode(self, token: str, now: int | None = None) -> SessionPayload:
        segment, separator, signature = (token or "").partition(".")
        if not segment or not separator or not signature:
            raise TokenError("Malformed token")
        if not (segment.isascii() and signature.isascii()):
            raise TokenError("Malformed token")

        expected = self._sign(segment)
        if not hmac.compare_digest(expected.encode("ascii"), signature.encode("ascii")):
            raise TokenError("Invalid token signature")

        try:
            data = json.loads(_b64url_decode(segment).decode("utf-8"))
        except (ValueError, binascii.Error) as exc:
            raise TokenError("Invalid token payload") from exc
        if not isinstance(data, dict):
            raise TokenError("Invalid token payload")

        subject = data.get("sub")
        expires_at = data.get("exp")
        if not isinstance(subject, str) or not subject:
            raise TokenError("Token subject is missing")
        if isinstance(expires_at, bool) or not isinstance(expires_at, int):
            raise TokenError("Token expiry is missing")

        current = now_ms() if now is None else now
        if expires_at <= current:
            raise TokenError("Token has expired")
        return SessionPayload(subject_id=subject, expires_at=expires_at)

    def _sign(self, segment: str) -> str:
        return hmac.new(self._secret, segment.encode("ascii"), hashlib.sha256).hexdigest()
