# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from collections.abc import Callable
from functools import wraps
from typing import Any

from flask import g, request

from refhub.domain.users.exceptions import TokenError
from refhub.domain.users.repositories import SessionTokenService
from refhub.infrastructure.audit import AuditAction, audit_log
from refhub.shared.clock import Clock, utcnow
from refhub.shared.logging import logger


def client_ip() -> str | None:
    ip_address = request.headers.get("X-Forwarded-For", request.remote_addr)
    if ip_address and "," in ip_address:
        ip_address = ip_address.split(",")[0].strip()
    return ip_address


def bearer_token() -> str:
    auth = request.headers.get("Authorization", "")
    if auth.startswith("Bearer "):
        return auth[7:].strip()
    return ""


def session_required(
    tokens: SessionTokenService, clock: Clock = utcnow
) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
    """Reject the request unless it carries a valid bearer session token.

    On success ``g.account_id`` and ``g.username`` hold the caller's identity.
    """

    def decorator(f: Callable[..., Any]) -> Callable[..., Any]:
        @wraps(f)
        def inner(*a, **kw):
            token = bearer_token()
            if not token:
                logger.warning(f"No bearer token on {request.method} {request.path}")
                raise TokenError()

            try:
                claim = tokens.decode(token, clock())
            except TokenError as exc:
                audit_log(
                    AuditAction.TOKEN_REJECTED,
                    ip_address=client_ip(),
                    details={"reason": exc.reason, "path": request.path},
                    success=False,
                )
                raise

            g.account_id = claim.account_id
            g.username = claim.username
            logger.debug(f"Auth OK: account_id={claim.account_id} {request.method} {request.path}")
            return f(*a, **kw)

        return inner

    return decorator


__all__ = ["bearer_token", "client_ip", "session_required"]
