# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from flask import Blueprint, Response, g, jsonify, request
from pydantic import ValidationError

from refhub.application.use_cases.referrals.get_code import GetReferralCodeUseCase
from refhub.application.use_cases.referrals.issue_code import IssueReferralCodeUseCase
from refhub.application.use_cases.referrals.list_referees import ListRefereesUseCase
from refhub.application.use_cases.referrals.revoke_code import RevokeReferralCodeUseCase
from refhub.domain.users.repositories import SessionTokenService
from refhub.infrastructure.audit import AuditAction, audit_log
from refhub.interfaces.http.auth import client_ip, session_required
from refhub.interfaces.http.dto.referrals import (
    IssueReferralCodeRequestDTO,
    RefereeDTO,
    ReferralCodeDTO,
)
from refhub.shared.clock import Clock, utcnow
from refhub.shared.deadline import Deadline
from refhub.shared.errors.validation import raise_validation_error


class ReferralsController:
    def __init__(
        self,
        *,
        issue_code: IssueReferralCodeUseCase,
        revoke_code: RevokeReferralCodeUseCase,
        get_code: GetReferralCodeUseCase,
        list_referees: ListRefereesUseCase,
        tokens: SessionTokenService,
        clock: Clock = utcnow,
        request_timeout: float = 5.0,
    ) -> None:
        self._issue_code = issue_code
        self._revoke_code = revoke_code
        self._get_code = get_code
        self._list_referees = list_referees
        self._tokens = tokens
        self._clock = clock
        self._request_timeout = request_timeout

    def _deadline(self) -> Deadline:
        return Deadline.after(self._request_timeout)

    def issue(self) -> tuple[Response, int]:
        try:
            dto = IssueReferralCodeRequestDTO.model_validate(request.get_json(silent=True) or {})
        except ValidationError as exc:
            raise_validation_error(exc)

        issued = self._issue_code.execute(
            self._deadline(),
            g.account_id,
            code=dto.code,
            expires_at=dto.expires_at,
            ttl_seconds=dto.ttl_seconds,
        )
        audit_log(
            AuditAction.REFERRAL_CODE_ISSUED,
            user_id=g.account_id,
            ip_address=client_ip(),
            details={"expires_at": issued.expires_at.isoformat()},
        )
        return jsonify(ReferralCodeDTO.from_domain(issued).model_dump(mode="json")), 201

    def revoke(self) -> tuple[Response, int]:
        self._revoke_code.execute(self._deadline(), g.account_id)
        audit_log(
            AuditAction.REFERRAL_CODE_REVOKED,
            user_id=g.account_id,
            ip_address=client_ip(),
        )
        return Response(status=204), 204

    def get_by_email(self, email: str) -> tuple[Response, int]:
        code = self._get_code.execute(self._deadline(), email, requested_by=g.account_id)
        return jsonify(ReferralCodeDTO.from_domain(code).model_dump(mode="json")), 200

    def list_referees(self, referrer_id: int) -> tuple[Response, int]:
        referees = self._list_referees.execute(
            self._deadline(), referrer_id, requested_by=g.account_id
        )
        payload = [RefereeDTO.from_domain(account).model_dump() for account in referees]
        return jsonify(payload), 200

    def as_blueprint(self) -> Blueprint:
        guard = session_required(self._tokens, self._clock)
        bp = Blueprint("referrals", __name__, url_prefix="/api")
        bp.add_url_rule(
            "/referral-code", endpoint="issue_code", view_func=guard(self.issue), methods=["POST"]
        )
        bp.add_url_rule(
            "/referral-code", endpoint="revoke_code", view_func=guard(self.revoke), methods=["DELETE"]
        )
        bp.add_url_rule(
            "/referral-code/<path:email>",
            endpoint="get_code",
            view_func=guard(self.get_by_email),
            methods=["GET"],
        )
        bp.add_url_rule(
            "/referrals/<int:referrer_id>",
            endpoint="list_referees",
            view_func=guard(self.list_referees),
            methods=["GET"],
        )
        return bp
