from __future__ import annotations

import base64
from datetime import timedelta

import jwt
import pytest

from refhub.application.services.session_tokens import JwtSessionTokenService
from refhub.domain.users.exceptions import (
    InvalidTokenSignatureError,
    MalformedTokenError,
    TokenError,
    TokenExpiredError,
)

OTHER_SECRET = "another-secret-that-is-also-long-enough"


def _flip_signature_byte(token: str, index: int) -> str:
    header, payload, signature = token.split(".")
    raw = bytearray(base64.urlsafe_b64decode(signature + "=" * (-len(signature) % 4)))
    raw[index] ^= 0x01
    tampered = base64.urlsafe_b64encode(bytes(raw)).rstrip(b"=").decode()
    return f"{header}.{payload}.{tampered}"


def test_issue_then_validate_returns_username(tokens: JwtSessionTokenService, clock) -> None:
    token = tokens.issue(7, "alice", clock())

    assert tokens.validate(token, clock() + timedelta(hours=1)) == "alice"


def test_decode_returns_claim(tokens: JwtSessionTokenService, clock) -> None:
    token = tokens.issue(7, "alice", clock())

    claim = tokens.decode(token, clock())

    assert claim.account_id == 7
    assert claim.username == "alice"
    assert claim.expires_at - claim.issued_at == timedelta(hours=24)


def test_payload_carries_user_id_and_username(tokens: JwtSessionTokenService, clock) -> None:
    token = tokens.issue(7, "alice", clock())

    payload = jwt.decode(token, options={"verify_signature": False})

    assert payload["user_id"] == 7
    assert payload["username"] == "alice"
    assert payload["exp"] - payload["iat"] == 24 * 60 * 60


def test_token_expires_after_ttl(tokens: JwtSessionTokenService, clock) -> None:
    token = tokens.issue(7, "alice", clock())

    tokens.validate(token, clock() + timedelta(hours=23, minutes=59))
    with pytest.raises(TokenExpiredError):
        tokens.validate(token, clock() + timedelta(hours=24))


def test_custom_ttl(clock) -> None:
    service = JwtSessionTokenService("x" * 40, ttl=timedelta(minutes=5))
    token = service.issue(1, "bob", clock())

    with pytest.raises(TokenExpiredError):
        service.validate(token, clock() + timedelta(minutes=5, seconds=1))


@pytest.mark.parametrize("index", [0, 15, 31])
def test_flipped_signature_byte_is_rejected(
    tokens: JwtSessionTokenService, clock, index: int
) -> None:
    token = tokens.issue(7, "alice", clock())

    with pytest.raises(InvalidTokenSignatureError):
        tokens.validate(_flip_signature_byte(token, index), clock())


def test_token_signed_with_other_secret_is_rejected(tokens: JwtSessionTokenService, clock) -> None:
    foreign = JwtSessionTokenService(OTHER_SECRET).issue(7, "alice", clock())

    with pytest.raises(InvalidTokenSignatureError):
        tokens.validate(foreign, clock())


@pytest.mark.parametrize("algorithm", ["HS512", "HS384"])
def test_other_algorithm_is_rejected(tokens: JwtSessionTokenService, clock, algorithm: str) -> None:
    now = int(clock().timestamp())
    payload = {"user_id": 7, "username": "alice", "iat": now, "exp": now + 3600}
    token = jwt.encode(payload, "test-secret-that-is-long-enough-for-hs256" * 2, algorithm=algorithm)

    with pytest.raises(InvalidTokenSignatureError):
        tokens.validate(token, clock())


def test_unsigned_token_is_rejected(tokens: JwtSessionTokenService, clock) -> None:
    now = int(clock().timestamp())
    payload = {"user_id": 7, "username": "alice", "iat": now, "exp": now + 3600}
    token = jwt.encode(payload, None, algorithm="none")

    with pytest.raises(InvalidTokenSignatureError):
        tokens.validate(token, clock())


@pytest.mark.parametrize("token", ["", "not-a-token", "a.b", "a.b.c"])
def test_malformed_token_is_rejected(tokens: JwtSessionTokenService, clock, token: str) -> None:
    with pytest.raises(MalformedTokenError):
        tokens.validate(token, clock())


def test_missing_claims_are_rejected(tokens: JwtSessionTokenService, clock) -> None:
    token = jwt.encode({"sub": "alice"}, "test-secret-that-is-long-enough-for-hs256", algorithm="HS256")

    with pytest.raises(MalformedTokenError):
        tokens.validate(token, clock())


def test_every_rejection_is_a_token_error() -> None:
    for error in (InvalidTokenSignatureError(), MalformedTokenError(), TokenExpiredError()):
        assert isinstance(error, TokenError)
        assert error.to_dict() == {"error": "unauthorized"}


def test_empty_secret_is_refused() -> None:
    with pytest.raises(ValueError):
        JwtSessionTokenService("")
