# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from refhub.domain.exceptions import InvariantViolation

MAX_CODE_LENGTH = 50


@dataclass(slots=True, frozen=True)
class ReferralCode:
    """Code owned by one account; at most one exists per owner."""

    owner_id: int
    code: str
    expires_at: datetime
    id: int | None = None
    created_at: datetime | None = None

    def __post_init__(self) -> None:
        if not self.code or not self.code.strip():
            raise InvariantViolation("code must not be empty", field="code")
        if len(self.code) > MAX_CODE_LENGTH:
            raise InvariantViolation(
                f"code must be at most {MAX_CODE_LENGTH} characters", field="code"
            )

    def is_active(self, now: datetime) -> bool:
        return self.expires_at > now


@dataclass(slots=True, frozen=True)
class ReferralLink:

    referrer_id: int
    referee_id: int
    created_at: datetime | None = None

    def __post_init__(self) -> None:
        if self.referrer_id == self.referee_id:
            raise InvariantViolation("an account cannot refer itself", field="referee_id")
