# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Persistence contract consumed by the identity and referral services.

Every method takes a :class:`~refhub.shared.deadline.Deadline` and must give
up with ``StoreTimeoutError`` once it elapses. Methods that touch more than
one row commit or roll back as a single transaction.
"""

from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime
from typing import Protocol

from refhub.domain.referrals.entities import ReferralCode
from refhub.domain.users.entities import Account
from refhub.shared.deadline import Deadline


class Store(Protocol):
    def create_account(self, deadline: Deadline, account: Account) -> int:
        """Insert ``account`` and return its id.

        Raises ``EmailAlreadyExistsError`` when the email is taken.
        """
        ...

    def find_account_by_email(self, deadline: Deadline, email: str) -> Account | None: ...

    def upsert_referral_code(
        self, deadline: Deadline, owner_id: int, code: str, expires_at: datetime
    ) -> ReferralCode:
        """Replace the owner's code in one transaction.

        Raises ``DuplicateReferralCodeError`` when another account owns ``code``
        and ``AccountNotFoundError`` when ``owner_id`` does not exist.
        """
        ...

    def delete_referral_code(self, deadline: Deadline, owner_id: int) -> None: ...

    def find_referral_code_by_owner_email(
        self, deadline: Deadline, email: str
    ) -> ReferralCode | None: ...

    def find_referral_owner_by_code(self, deadline: Deadline, code: str, now: datetime) -> int:
        """Return the owner id of a code valid at ``now``.

        Raises ``ReferralCodeNotFoundError`` or ``ReferralCodeExpiredError``.
        """
        ...

    def list_referees_by_referrer(self, deadline: Deadline, referrer_id: int) -> Sequence[Account]: ...

    def create_account_with_referral_link(
        self,
        deadline: Deadline,
        referrer_id: int,
        account: Account,
        *,
        code: str | None = None,
        now: datetime | None = None,
    ) -> int:
        """Insert ``account`` and its referral link atomically.

        When ``code`` and ``now`` are given the code is re-checked inside the
        transaction and must still belong to ``referrer_id`` and be unexpired.
        """
        ...


__all__ = ["Store"]
