# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Referral code lifecycle: issue, revoke, resolve and owner lookup."""

from __future__ import annotations

import secrets
from datetime import datetime

from refhub.domain.exceptions import InvariantViolation
from refhub.domain.referrals.entities import ReferralCode
from refhub.domain.referrals.exceptions import ReferralCodeNotFoundError
from refhub.domain.store import Store
from refhub.shared.clock import ensure_aware
from refhub.shared.deadline import Deadline
from refhub.shared.logging import logger

CODE_ALPHABET = "ABCDEFGHJKMNPQRSTUVWXYZ23456789"


def generate_code(length: int = 8) -> str:
    """Random code without look-alike characters (no 0/O, 1/I/L)."""
    return "".join(secrets.choice(CODE_ALPHABET) for _ in range(length))


class ReferralCodeManager:
    def __init__(self, store: Store, *, code_length: int = 8) -> None:
        self._store = store
        self._code_length = code_length

    def issue(
        self,
        deadline: Deadline,
        owner_id: int,
        code: str | None,
        expires_at: datetime,
        now: datetime,
    ) -> ReferralCode:
        """Replace whatever code ``owner_id`` had with ``code``."""
        expires_at = ensure_aware(expires_at)
        if expires_at <= ensure_aware(now):
            raise InvariantViolation("expiry must be in the future", field="expires_at")

        value = code.strip() if code else generate_code(self._code_length)
        # Validates the code shape before touching the store.
        ReferralCode(owner_id=owner_id, code=value, expires_at=expires_at)

        issued = self._store.upsert_referral_code(deadline, owner_id, value, expires_at)
        logger.info(
            f"referral.issue: owner_id={owner_id} expires_at={expires_at.isoformat()}"
        )
        return issued

    def revoke(self, deadline: Deadline, owner_id: int) -> None:
        self._store.delete_referral_code(deadline, owner_id)
        logger.info(f"referral.revoke: owner_id={owner_id}")

    def resolve(self, deadline: Deadline, code: str, now: datetime) -> int:
        """Return the owner of ``code`` if it is still valid at ``now``.

        Raises ``ReferralCodeNotFoundError`` for unknown codes and
        ``ReferralCodeExpiredError`` for lapsed ones.
        """
        if not code or not code.strip():
            raise ReferralCodeNotFoundError()
        return self._store.find_referral_owner_by_code(deadline, code.strip(), ensure_aware(now))

    def lookup_by_owner_email(self, deadline: Deadline, email: str, now: datetime) -> ReferralCode:
        found = self._store.find_referral_code_by_owner_email(deadline, email)
        if found is None or not found.is_active(ensure_aware(now)):
            raise ReferralCodeNotFoundError()
        return found


__all__ = [
    "CODE_ALPHABET",
    "ReferralCodeManager",
    "generate_code",
]
