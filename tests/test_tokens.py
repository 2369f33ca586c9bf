from __future__ import annotations

import base64
import json

import pytest

from tategaki.clock import now_ms
from tategaki.errors import ConfigurationError, TokenError
from tategaki.services.tokens import SessionPayload, TokenCodec


def _payload(offset_ms: int = 60_000) -> SessionPayload:
    return SessionPayload(subject_id="admin", expires_at=now_ms() + offset_ms)


def test_token_round_trip() -> None:
    codec = TokenCodec("secret")
    payload = _payload()

    assert codec.decode(codec.encode(payload)) == payload


def test_token_encoding_is_deterministic_and_shaped() -> None:
    codec = TokenCodec("secret")
    payload = SessionPayload(subject_id="admin", expires_at=1_900_000_000_000)

    token = codec.encode(payload)
    segment, signature = token.split(".")
    padded = segment + "=" * (-len(segment) % 4)

    assert token == codec.encode(payload)
    assert json.loads(base64.urlsafe_b64decode(padded)) == {
        "exp": 1_900_000_000_000,
        "sub": "admin",
    }
    assert len(signature) == 64
    assert int(signature, 16) >= 0


def test_token_with_any_signature_character_changed_is_rejected() -> None:
    codec = TokenCodec("secret")
    token = codec.encode(_payload())
    segment, signature = token.split(".")

    for index, char in enumerate(signature):
        replacement = "0" if char != "0" else "1"
        tampered = f"{segment}.{signature[:index]}{replacement}{signature[index + 1:]}"
        with pytest.raises(TokenError):
            codec.decode(tampered)


def test_token_signed_with_other_secret_is_rejected() -> None:
    token = TokenCodec("other").encode(_payload())

    with pytest.raises(TokenError):
        TokenCodec("secret").decode(token)


def test_token_rejected_once_expiry_reached() -> None:
    codec = TokenCodec("secret")
    payload = SessionPayload(subject_id="admin", expires_at=1_000)
    token = codec.encode(payload)

    assert codec.decode(token, now=999) == payload
    with pytest.raises(TokenError):
        codec.decode(token, now=1_000)
    with pytest.raises(TokenError):
        codec.decode(codec.encode(_payload(offset_ms=-1)))


@pytest.mark.parametrize("token", ["", "no-separator", ".abc", "abc.", "éé.abc"])
def test_malformed_tokens_are_rejected(token: str) -> None:
    with pytest.raises(TokenError):
        TokenCodec("secret").decode(token)


def test_token_with_missing_fields_is_rejected() -> None:
    codec = TokenCodec("secret")
    segment = base64.urlsafe_b64encode(b'{"exp":99999999999999}').decode().rstrip("=")
    token = f"{segment}.{codec._sign(segment)}"

    with pytest.raises(TokenError):
        codec.decode(token)


def test_codec_requires_secret() -> None:
    with pytest.raises(ConfigurationError):
        TokenCodec("")
