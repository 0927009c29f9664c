# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass(slots=True, frozen=True)
class Account:

    id: int
    username: str
    email: str
    password_hash: str
    created_at: datetime | None = None


@dataclass(slots=True, frozen=True)
class SessionClaim:
    """Identity assertion carried inside a signed session token."""

    account_id: int
    username: str
    issued_at: datetime
    expires_at: datetime

    def is_expired(self, now: datetime) -> bool:
        return not now < self.expires_at
