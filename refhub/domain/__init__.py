# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from .exceptions import InvariantViolation, InvariantViolationError
from .referrals.entities import ReferralCode, ReferralLink
from .store import Store
from .users.entities import Account, SessionClaim

__all__ = [
    "Account",
    "InvariantViolation",
    "InvariantViolationError",
    "ReferralCode",
    "ReferralLink",
    "SessionClaim",
    "Store",
]
