# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from http import HTTPStatus

from refhub.shared.errors.base import DomainError


class InvalidReferralCodeError(DomainError):
    code = "invalid_referral_code"
    status = HTTPStatus.BAD_REQUEST


class ReferralCodeResolutionError(DomainError):
    pass


class ReferralCodeNotFoundError(ReferralCodeResolutionError):
    code = "referral_code_not_found"
    status = HTTPStatus.NOT_FOUND


class ReferralCodeExpiredError(ReferralCodeResolutionError):
    code = "referral_code_expired"
    status = HTTPStatus.GONE


class DuplicateReferralCodeError(DomainError):
    code = "duplicate_referral_code"
    status = HTTPStatus.CONFLICT
