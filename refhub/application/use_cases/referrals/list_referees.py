# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from refhub.domain.store import Store
from refhub.domain.users.entities import Account
from refhub.shared.deadline import Deadline
from refhub.shared.errors.base import ForbiddenError
from refhub.shared.logging import logger


class ListRefereesUseCase:
    def __init__(self, *, store: Store) -> None:
        self._store = store

    def execute(self, deadline: Deadline, referrer_id: int, *, requested_by: int | None = None) -> list[Account]:
        """Accounts that registered with one of ``referrer_id``'s codes.

        When ``requested_by`` is given it must be the referrer itself.
        """
        if requested_by is not None and requested_by != referrer_id:
            logger.warning(
                f"referrals.list: account_id={requested_by} denied access to referrer_id={referrer_id}"
            )
            raise ForbiddenError()
        return list(self._store.list_referees_by_referrer(deadline, referrer_id))


__all__ = ["ListRefereesUseCase"]
