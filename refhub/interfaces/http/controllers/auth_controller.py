# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from flask import Blueprint, Response, jsonify, request
from pydantic import ValidationError

from refhub.application.use_cases.users.login_user import LoginUserUseCase
from refhub.application.use_cases.users.register_user import RegisterUserUseCase
from refhub.domain.referrals.exceptions import InvalidReferralCodeError
from refhub.domain.users.exceptions import InvalidCredentialsError
from refhub.infrastructure.audit import AuditAction, audit_log
from refhub.interfaces.http.auth import client_ip
from refhub.interfaces.http.dto.auth import (
    AccountCreatedDTO,
    LoginRequestDTO,
    RegisterRequestDTO,
    RegisterWithReferralRequestDTO,
    TokenDTO,
)
from refhub.shared.deadline import Deadline
from refhub.shared.errors.validation import raise_validation_error
from refhub.shared.logging import logger


class AuthController:
    def __init__(
        self,
        *,
        register_use_case: RegisterUserUseCase,
        login_use_case: LoginUserUseCase,
        request_timeout: float = 5.0,
    ) -> None:
        self._register_use_case = register_use_case
        self._login_use_case = login_use_case
        self._request_timeout = request_timeout

    def register(self) -> tuple[Response, int]:
        try:
            dto = RegisterRequestDTO.model_validate(request.get_json(silent=True) or {})
        except ValidationError as exc:
            raise_validation_error(exc)

        account = self._register_use_case.execute(
            Deadline.after(self._request_timeout), dto.username, dto.email, dto.password
        )

        audit_log(
            AuditAction.REGISTER,
            user_id=account.id,
            ip_address=client_ip(),
            success=True,
        )
        logger.info(f"auth.register: ok account_id={account.id}")
        return jsonify(AccountCreatedDTO(id=account.id).model_dump()), 201

    def register_with_referral(self) -> tuple[Response, int]:
        try:
            dto = RegisterWithReferralRequestDTO.model_validate(request.get_json(silent=True) or {})
        except ValidationError as exc:
            raise_validation_error(exc)

        try:
            account = self._register_use_case.execute_with_referral(
                Deadline.after(self._request_timeout),
                dto.referral_code,
                dto.user.username,
                dto.user.email,
                dto.user.password,
            )
        except InvalidReferralCodeError:
            audit_log(
                AuditAction.REGISTER_FAILED,
                ip_address=client_ip(),
                details={"reason": "invalid_referral_code"},
                success=False,
            )
            raise

        audit_log(
            AuditAction.REGISTER_WITH_REFERRAL,
            user_id=account.id,
            ip_address=client_ip(),
            details={"with_code": bool(dto.referral_code)},
            success=True,
        )
        logger.info(f"auth.register_with_referral: ok account_id={account.id}")
        return jsonify(AccountCreatedDTO(id=account.id).model_dump()), 201

    def login(self) -> tuple[Response, int]:
        try:
            dto = LoginRequestDTO.model_validate(request.get_json(silent=True) or {})
        except ValidationError as exc:
            raise_validation_error(exc)

        ip_address = client_ip()
        try:
            token = self._login_use_case.execute(
                Deadline.after(self._request_timeout), dto.email, dto.password
            )
        except InvalidCredentialsError:
            audit_log(AuditAction.LOGIN_FAILED, ip_address=ip_address, success=False)
            raise

        audit_log(AuditAction.LOGIN_SUCCESS, ip_address=ip_address, success=True)
        return jsonify(TokenDTO(token=token).model_dump()), 200

    def as_blueprint(self) -> Blueprint:
        bp = Blueprint("auth", __name__, url_prefix="/api/auth")
        bp.add_url_rule("/register", view_func=self.register, methods=["POST"])
        bp.add_url_rule(
            "/register-with-referral", view_func=self.register_with_referral, methods=["POST"]
        )
        bp.add_url_rule("/login", view_func=self.login, methods=["POST"])
        return bp
