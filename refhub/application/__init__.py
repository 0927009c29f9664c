# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from .services.password_hashing import WerkzeugPasswordHasher
from .services.referral_codes import ReferralCodeManager
from .services.session_tokens import JwtSessionTokenService
from .use_cases.referrals.get_code import GetReferralCodeUseCase
from .use_cases.referrals.issue_code import IssueReferralCodeUseCase
from .use_cases.referrals.list_referees import ListRefereesUseCase
from .use_cases.referrals.revoke_code import RevokeReferralCodeUseCase
from .use_cases.users.login_user import LoginUserUseCase
from .use_cases.users.register_user import RegisterUserUseCase

__all__ = [
    "GetReferralCodeUseCase",
    "IssueReferralCodeUseCase",
    "JwtSessionTokenService",
    "ListRefereesUseCase",
    "LoginUserUseCase",
    "ReferralCodeManager",
    "RegisterUserUseCase",
    "RevokeReferralCodeUseCase",
    "WerkzeugPasswordHasher",
]
