from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field, model_validator

from refhub.domain.referrals.entities import ReferralCode
from refhub.domain.users.entities import Account


class IssueReferralCodeRequestDTO(BaseModel):
    code: str | None = Field(default=None, min_length=1, max_length=50)
    expires_at: datetime | None = None
    ttl_seconds: int | None = Field(default=None, ge=60)

    @model_validator(mode="after")
    def _one_expiry_source(self) -> "IssueReferralCodeRequestDTO":
        if self.expires_at is not None and self.ttl_seconds is not None:
            raise ValueError("pass either expires_at or ttl_seconds, not both")
        return self


class ReferralCodeDTO(BaseModel):
    code: str
    owner_id: int
    expires_at: datetime
    created_at: datetime | None = None

    @classmethod
    def from_domain(cls, code: ReferralCode) -> "ReferralCodeDTO":
        return cls(
            code=code.code,
            owner_id=code.owner_id,
            expires_at=code.expires_at,
            created_at=code.created_at,
        )


class RefereeDTO(BaseModel):
    id: int
    username: str
    email: str

    @classmethod
    def from_domain(cls, account: Account) -> "RefereeDTO":
        return cls(id=account.id, username=account.username, email=account.email)
