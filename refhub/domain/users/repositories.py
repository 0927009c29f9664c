# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from datetime import datetime
from typing import Protocol

from .entities import SessionClaim


class PasswordHasher(Protocol):
    def hash(self, password: str) -> str: ...
    def verify(self, password: str, hashed: str) -> bool: ...


class SessionTokenService(Protocol):
    def issue(self, account_id: int, username: str, now: datetime) -> str: ...
    def validate(self, token: str, now: datetime) -> str: ...
    def decode(self, token: str, now: datetime) -> SessionClaim: ...
