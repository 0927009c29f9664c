# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from refhub.application.services.referral_codes import ReferralCodeManager
from refhub.domain.referrals.exceptions import (
    InvalidReferralCodeError,
    ReferralCodeResolutionError,
)
from refhub.domain.store import Store
from refhub.domain.users.entities import Account
from refhub.domain.users.repositories import PasswordHasher
from refhub.shared.clock import Clock, utcnow
from refhub.shared.deadline import Deadline
from refhub.shared.logging import logger


class RegisterUserUseCase:
    def __init__(
        self,
        *,
        store: Store,
        referral_codes: ReferralCodeManager,
        password_hasher: PasswordHasher,
        clock: Clock = utcnow,
    ) -> None:
        self._store = store
        self._referral_codes = referral_codes
        self._password_hasher = password_hasher
        self._clock = clock

    def execute(self, deadline: Deadline, username: str, email: str, password: str) -> Account:
        account = self._new_account(username, email, password)
        account_id = self._store.create_account(deadline, account)
        logger.info(f"register: created account_id={account_id}")
        return _with_id(account, account_id)

    def execute_with_referral(
        self,
        deadline: Deadline,
        referral_code: str | None,
        username: str,
        email: str,
        password: str,
    ) -> Account:
        """Register and credit the code's owner, or create nothing at all.

        Unknown and expired codes both surface as ``InvalidReferralCodeError``.
        """
        if not referral_code or not referral_code.strip():
            return self.execute(deadline, username, email, password)

        code = referral_code.strip()
        now = self._clock()
        try:
            referrer_id = self._referral_codes.resolve(deadline, code, now)
        except ReferralCodeResolutionError as exc:
            logger.info(f"register.referral: code rejected reason={exc.code}")
            raise InvalidReferralCodeError() from None

        account = self._new_account(username, email, password)
        try:
            account_id = self._store.create_account_with_referral_link(
                deadline, referrer_id, account, code=code, now=now
            )
        except ReferralCodeResolutionError as exc:
            logger.info(f"register.referral: code lapsed before commit reason={exc.code}")
            raise InvalidReferralCodeError() from None

        logger.info(f"register.referral: created account_id={account_id} referrer_id={referrer_id}")
        return _with_id(account, account_id)

    def _new_account(self, username: str, email: str, password: str) -> Account:
        hashed = self._password_hasher.hash(password)
        return Account(
            id=0,
            username=username,
            email=email,
            password_hash=hashed,
            created_at=self._clock(),
        )


def _with_id(account: Account, account_id: int) -> Account:
    return Account(
        id=account_id,
        username=account.username,
        email=account.email,
        password_hash=account.password_hash,
        created_at=account.created_at,
    )
