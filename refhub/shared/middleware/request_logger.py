# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

import hashlib
import secrets
import time
from typing import Any

from flask import Flask, g, request

from refhub.shared.logging import clear_correlation_id, logger, set_correlation_id

_SENSITIVE_HEADERS = frozenset({"authorization", "cookie", "x-api-key", "x-auth-token"})
_SENSITIVE_PARAMS = ("password", "token", "secret", "code")


def _client_ip() -> str:
    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.remote_addr or "unknown"


def _sanitize_headers(headers: dict[str, str]) -> dict[str, str]:
    sanitized = {}
    for key, value in headers.items():
        if key.lower() in _SENSITIVE_HEADERS:
            sanitized[key] = f"<hashed:{hashlib.sha256(value.encode()).hexdigest()[:8]}>"
        else:
            sanitized[key] = value
    return sanitized


def _sanitize_query_params(params: dict[str, Any]) -> dict[str, Any]:
    return {
        key: "<redacted>" if any(s in key.lower() for s in _SENSITIVE_PARAMS) else value
        for key, value in params.items()
    }


def configure_request_logging(app: Flask, *, debug_mode: bool = False) -> None:
    """Tag every request with a correlation id and log its start and end."""

    @app.before_request
    def _before_request() -> None:
        correlation_id = request.headers.get("X-Request-ID") or secrets.token_urlsafe(8)
        set_correlation_id(correlation_id[:64])
        g.request_start_time = time.perf_counter()

        if debug_mode:
            logger.info(
                f"Request started: {request.method} {request.path} from {_client_ip()}, "
                f"query={_sanitize_query_params(dict(request.args))}, "
                f"headers={_sanitize_headers(dict(request.headers))}, "
                f"body_size={len(request.get_data(cache=True))}"
            )
        else:
            logger.info(f"Request: {request.method} {request.path} from {_client_ip()}")

    @app.after_request
    def _after_request(response):
        start = getattr(g, "request_start_time", time.perf_counter())
        duration = time.perf_counter() - start
        account_id = getattr(g, "account_id", None)
        logger.info(
            f"Response: {request.method} {request.path} "
            f"status={response.status_code}, duration={duration:.3f}s, account={account_id}"
        )
        return response

    @app.teardown_request
    def _teardown_request(exc: BaseException | None) -> None:
        if exc is not None:
            logger.error(f"Request error: {type(exc).__name__} on {request.method} {request.path}")
        clear_correlation_id()


__all__ = ["configure_request_logging"]
