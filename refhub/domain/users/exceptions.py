# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from http import HTTPStatus

from refhub.shared.errors.base import DomainError, InfrastructureError


class EmailAlreadyExistsError(DomainError):
    code = "email_already_exists"
    status = HTTPStatus.CONFLICT


class InvalidCredentialsError(DomainError):
    code = "invalid_credentials"
    status = HTTPStatus.UNAUTHORIZED


class PasswordHashingError(InfrastructureError):
    def __init__(self) -> None:
        super().__init__("password_hashing_failed")


class MalformedPasswordHashError(InfrastructureError):
    def __init__(self) -> None:
        super().__init__("malformed_password_hash")


class TokenError(DomainError):
    """Any session token rejection; every subclass renders as ``unauthorized``."""

    code = "unauthorized"
    status = HTTPStatus.UNAUTHORIZED
    reason = "token_rejected"


class InvalidTokenSignatureError(TokenError):
    reason = "invalid_signature"


class MalformedTokenError(TokenError):
    reason = "malformed_token"


class TokenExpiredError(TokenError):
    reason = "token_expired"


class AccountNotFoundError(DomainError):
    code = "account_not_found"
    status = HTTPStatus.NOT_FOUND
