# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from refhub.application.services.referral_codes import ReferralCodeManager
from refhub.shared.deadline import Deadline


class RevokeReferralCodeUseCase:
    def __init__(self, *, referral_codes: ReferralCodeManager) -> None:
        self._referral_codes = referral_codes

    def execute(self, deadline: Deadline, owner_id: int) -> None:
        self._referral_codes.revoke(deadline, owner_id)


__all__ = ["RevokeReferralCodeUseCase"]
