# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from datetime import datetime, timedelta

from refhub.application.services.referral_codes import ReferralCodeManager
from refhub.domain.referrals.entities import ReferralCode
from refhub.shared.clock import Clock, utcnow
from refhub.shared.deadline import Deadline


class IssueReferralCodeUseCase:
    def __init__(
        self,
        *,
        referral_codes: ReferralCodeManager,
        default_ttl: timedelta,
        clock: Clock = utcnow,
    ) -> None:
        self._referral_codes = referral_codes
        self._default_ttl = default_ttl
        self._clock = clock

    def execute(
        self,
        deadline: Deadline,
        owner_id: int,
        *,
        code: str | None = None,
        expires_at: datetime | None = None,
        ttl_seconds: int | None = None,
    ) -> ReferralCode:
        now = self._clock()
        if expires_at is None:
            ttl = timedelta(seconds=ttl_seconds) if ttl_seconds else self._default_ttl
            expires_at = now + ttl
        return self._referral_codes.issue(deadline, owner_id, code, expires_at, now)


__all__ = ["IssueReferralCodeUseCase"]
