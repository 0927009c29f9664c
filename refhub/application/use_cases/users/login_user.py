# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from refhub.domain.store import Store
from refhub.domain.users.exceptions import InvalidCredentialsError, MalformedPasswordHashError
from refhub.domain.users.repositories import PasswordHasher, SessionTokenService
from refhub.shared.clock import Clock, utcnow
from refhub.shared.deadline import Deadline
from refhub.shared.logging import logger


class LoginUserUseCase:
    def __init__(
        self,
        *,
        store: Store,
        tokens: SessionTokenService,
        password_hasher: PasswordHasher,
        clock: Clock = utcnow,
    ) -> None:
        self._store = store
        self._tokens = tokens
        self._password_hasher = password_hasher
        self._clock = clock
        # Verified against when the email is unknown so both branches cost one verify.
        self._dummy_hash = password_hasher.hash("refhub-login-timing-equaliser")

    def execute(self, deadline: Deadline, email: str, password: str) -> str:
        account = self._store.find_account_by_email(deadline, email)
        digest = account.password_hash if account else self._dummy_hash

        try:
            password_valid = self._password_hasher.verify(password, digest)
        except MalformedPasswordHashError:
            logger.error(
                f"auth.login: stored password digest is malformed "
                f"account_id={account.id if account else None}"
            )
            password_valid = False

        if account is None or not password_valid:
            raise InvalidCredentialsError()

        token = self._tokens.issue(account.id, account.username, self._clock())
        logger.info(f"auth.login: ok account_id={account.id}")
        return token
