# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from refhub.application.services.referral_codes import ReferralCodeManager
from refhub.domain.referrals.entities import ReferralCode
from refhub.domain.store import Store
from refhub.shared.clock import Clock, utcnow
from refhub.shared.deadline import Deadline
from refhub.shared.errors.base import ForbiddenError
from refhub.shared.logging import logger


class GetReferralCodeUseCase:
    def __init__(
        self,
        *,
        store: Store,
        referral_codes: ReferralCodeManager,
        clock: Clock = utcnow,
    ) -> None:
        self._store = store
        self._referral_codes = referral_codes
        self._clock = clock

    def execute(
        self, deadline: Deadline, owner_email: str, *, requested_by: int | None = None
    ) -> ReferralCode:
        """Active code of the account registered as ``owner_email``.

        When ``requested_by`` is given the email must belong to that account;
        unknown emails are refused the same way as foreign ones.
        """
        if requested_by is not None:
            owner = self._store.find_account_by_email(deadline, owner_email)
            if owner is None or owner.id != requested_by:
                logger.warning(f"referrals.get_code: account_id={requested_by} denied lookup")
                raise ForbiddenError()
        return self._referral_codes.lookup_by_owner_email(deadline, owner_email, self._clock())


__all__ = ["GetReferralCodeUseCase"]
