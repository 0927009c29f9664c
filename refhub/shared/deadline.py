# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Per-request time budget handed to every store call."""

from __future__ import annotations

import time
from dataclasses import dataclass

from refhub.shared.errors.base import StoreTimeoutError
from refhub.shared.logging import logger


@dataclass(slots=True, frozen=True)
class Deadline:
    expires_at: float

    @classmethod
    def after(cls, seconds: float) -> Deadline:
        return cls(expires_at=time.monotonic() + seconds)

    def remaining(self) -> float:
        return max(self.expires_at - time.monotonic(), 0.0)

    def expired(self) -> bool:
        return time.monotonic() >= self.expires_at

    def check(self, operation: str) -> None:
        """Raise ``StoreTimeoutError`` once the budget is spent."""
        if self.expired():
            logger.warning(f"deadline: {operation} aborted, budget exhausted")
            raise StoreTimeoutError()


__all__ = ["Deadline"]
