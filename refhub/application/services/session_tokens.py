# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Stateless HS256 session tokens."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta

import jwt

from refhub.domain.users.entities import SessionClaim
from refhub.domain.users.exceptions import (
    InvalidTokenSignatureError,
    MalformedTokenError,
    TokenExpiredError,
)
from refhub.domain.users.repositories import SessionTokenService
from refhub.shared.clock import ensure_aware
from refhub.shared.logging import logger

ALGORITHM = "HS256"
DEFAULT_TTL = timedelta(hours=24)
_REQUIRED_CLAIMS = ["user_id", "username", "iat", "exp"]


class JwtSessionTokenService(SessionTokenService):
    """Signs and checks session claims; the only holder of the signing secret."""

    def __init__(self, secret: str, *, ttl: timedelta = DEFAULT_TTL) -> None:
        if not secret:
            raise ValueError("session token secret must not be empty")
        self._secret = secret
        self._ttl = ttl

    def issue(self, account_id: int, username: str, now: datetime) -> str:
        issued_at = ensure_aware(now)
        expires_at = issued_at + self._ttl
        payload = {
            "user_id": account_id,
            "username": username,
            "sub": username,
            "iat": int(issued_at.timestamp()),
            "exp": int(expires_at.timestamp()),
        }
        return jwt.encode(payload, self._secret, algorithm=ALGORITHM)

    def validate(self, token: str, now: datetime) -> str:
        return self.decode(token, now).username

    def decode(self, token: str, now: datetime) -> SessionClaim:
        try:
            header = jwt.get_unverified_header(token)
        except jwt.InvalidTokenError as exc:
            logger.debug(f"token: unreadable header: {exc}")
            raise MalformedTokenError() from exc

        if header.get("alg") != ALGORITHM:
            logger.warning(f"token: rejected algorithm {header.get('alg')!r}")
            raise InvalidTokenSignatureError()

        try:
            payload = jwt.decode(
                token,
                self._secret,
                algorithms=[ALGORITHM],
                options={
                    "verify_exp": False,
                    "verify_iat": False,
                    "verify_nbf": False,
                    "require": _REQUIRED_CLAIMS,
                },
            )
        except (jwt.InvalidSignatureError, jwt.InvalidAlgorithmError) as exc:
            logger.warning(f"token: signature check failed: {exc}")
            raise InvalidTokenSignatureError() from exc
        except jwt.InvalidTokenError as exc:
            logger.debug(f"token: malformed: {exc}")
            raise MalformedTokenError() from exc

        claim = _claim_from_payload(payload)
        if claim.is_expired(ensure_aware(now)):
            logger.debug(f"token: expired for user_id={claim.account_id}")
            raise TokenExpiredError()
        return claim


def _claim_from_payload(payload: dict) -> SessionClaim:
    try:
        return SessionClaim(
            account_id=int(payload["user_id"]),
            username=str(payload["username"]),
            issued_at=datetime.fromtimestamp(int(payload["iat"]), UTC),
            expires_at=datetime.fromtimestamp(int(payload["exp"]), UTC),
        )
    except (TypeError, ValueError, OverflowError) as exc:
        raise MalformedTokenError() from exc


__all__ = ["ALGORITHM", "DEFAULT_TTL", "JwtSessionTokenService"]
