# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from collections.abc import Callable, Iterator, Sequence
from contextlib import contextmanager
from datetime import UTC, datetime

from sqlalchemy import delete, select
from sqlalchemy.exc import DBAPIError, IntegrityError
from sqlalchemy.exc import TimeoutError as PoolTimeoutError
from sqlalchemy.orm import Session

from refhub.domain.referrals.entities import ReferralCode as DomainReferralCode
from refhub.domain.referrals.exceptions import (
    DuplicateReferralCodeError,
    ReferralCodeExpiredError,
    ReferralCodeNotFoundError,
)
from refhub.domain.store import Store
from refhub.domain.users.entities import Account
from refhub.domain.users.exceptions import AccountNotFoundError, EmailAlreadyExistsError
from refhub.infrastructure.db.models import ReferralCode, ReferralLink, User
from refhub.infrastructure.unit_of_work import SqlAlchemyUnitOfWork
from refhub.shared.clock import ensure_aware, utcnow
from refhub.shared.deadline import Deadline
from refhub.shared.errors.base import StoreTimeoutError, StoreUnavailableError
from refhub.shared.logging import logger


def _utc(moment: datetime) -> datetime:
    return ensure_aware(moment).astimezone(UTC)


def _account_to_domain(row: User) -> Account:
    return Account(
        id=row.id,
        username=row.username,
        email=row.email,
        password_hash=row.password_hash,
        created_at=ensure_aware(row.created_at) if row.created_at else None,
    )


def _code_to_domain(row: ReferralCode) -> DomainReferralCode:
    return DomainReferralCode(
        id=row.id,
        owner_id=row.user_id,
        code=row.code,
        expires_at=ensure_aware(row.expires_at),
        created_at=ensure_aware(row.created_at) if row.created_at else None,
    )


class SqlAlchemyStore(Store):
    def __init__(self, session_factory: Callable[[], Session]):
        self._session_factory = session_factory

    @contextmanager
    def _transaction(self, deadline: Deadline, operation: str) -> Iterator[Session]:
        try:
            with SqlAlchemyUnitOfWork(
                self._session_factory, deadline=deadline, operation=operation
            ) as uow:
                yield uow.session
        except IntegrityError:
            raise
        except PoolTimeoutError as exc:
            logger.error(f"store.{operation}: no connection available: {exc}")
            raise StoreTimeoutError() from exc
        except DBAPIError as exc:
            if deadline.expired():
                logger.warning(f"store.{operation}: cancelled at deadline: {exc}")
                raise StoreTimeoutError() from exc
            logger.error(f"store.{operation}: database unavailable: {exc}")
            raise StoreUnavailableError() from exc

    def create_account(self, deadline: Deadline, account: Account) -> int:
        with self._transaction(deadline, "create_account") as session:
            row = self._insert_account(session, account)
            return row.id

    def find_account_by_email(self, deadline: Deadline, email: str) -> Account | None:
        with self._transaction(deadline, "find_account_by_email") as session:
            row = session.execute(select(User).where(User.email == email)).scalar_one_or_none()
            return _account_to_domain(row) if row else None

    def upsert_referral_code(
        self, deadline: Deadline, owner_id: int, code: str, expires_at: datetime
    ) -> DomainReferralCode:
        with self._transaction(deadline, "upsert_referral_code") as session:
            # Delete first: the write lock is taken before anything is read.
            session.execute(delete(ReferralCode).where(ReferralCode.user_id == owner_id))
            if session.get(User, owner_id) is None:
                logger.warning(f"store.upsert_referral_code: owner_id={owner_id} does not exist")
                raise AccountNotFoundError()
            row = ReferralCode(
                user_id=owner_id,
                code=code,
                expires_at=_utc(expires_at),
                created_at=utcnow(),
            )
            session.add(row)
            try:
                session.flush()
            except IntegrityError as exc:
                logger.info(f"store.upsert_referral_code: code already taken owner_id={owner_id}")
                raise DuplicateReferralCodeError() from exc
            return _code_to_domain(row)

    def delete_referral_code(self, deadline: Deadline, owner_id: int) -> None:
        with self._transaction(deadline, "delete_referral_code") as session:
            session.execute(delete(ReferralCode).where(ReferralCode.user_id == owner_id))

    def find_referral_code_by_owner_email(
        self, deadline: Deadline, email: str
    ) -> DomainReferralCode | None:
        with self._transaction(deadline, "find_referral_code_by_owner_email") as session:
            row = session.execute(
                select(ReferralCode)
                .join(User, ReferralCode.user_id == User.id)
                .where(User.email == email)
            ).scalar_one_or_none()
            return _code_to_domain(row) if row else None

    def find_referral_owner_by_code(self, deadline: Deadline, code: str, now: datetime) -> int:
        with self._transaction(deadline, "find_referral_owner_by_code") as session:
            row = session.execute(
                select(ReferralCode).where(ReferralCode.code == code)
            ).scalar_one_or_none()
            if row is None:
                raise ReferralCodeNotFoundError()
            if not ensure_aware(row.expires_at) > _utc(now):
                raise ReferralCodeExpiredError()
            return row.user_id

    def list_referees_by_referrer(self, deadline: Deadline, referrer_id: int) -> Sequence[Account]:
        with self._transaction(deadline, "list_referees_by_referrer") as session:
            rows = (
                session.execute(
                    select(User)
                    .join(ReferralLink, ReferralLink.referee_id == User.id)
                    .where(ReferralLink.referrer_id == referrer_id)
                    .order_by(ReferralLink.id.asc())
                )
                .scalars()
                .all()
            )
            return [_account_to_domain(row) for row in rows]

    def create_account_with_referral_link(
        self,
        deadline: Deadline,
        referrer_id: int,
        account: Account,
        *,
        code: str | None = None,
        now: datetime | None = None,
    ) -> int:
        with self._transaction(deadline, "create_account_with_referral_link") as session:
            if code is not None:
                self._recheck_code(session, referrer_id, code, now)

            row = self._insert_account(session, account)
            session.add(
                ReferralLink(referrer_id=referrer_id, referee_id=row.id, created_at=utcnow())
            )
            try:
                session.flush()
            except IntegrityError as exc:
                # Only the referrer foreign key can fail here.
                logger.warning(f"store.referral_link: referrer_id={referrer_id} vanished")
                raise ReferralCodeNotFoundError() from exc
            return row.id

    @staticmethod
    def _recheck_code(
        session: Session, referrer_id: int, code: str, now: datetime | None
    ) -> None:
        row = session.execute(
            select(ReferralCode).where(ReferralCode.code == code).with_for_update()
        ).scalar_one_or_none()
        if row is None or row.user_id != referrer_id:
            raise ReferralCodeNotFoundError()
        if now is not None and not ensure_aware(row.expires_at) > _utc(now):
            raise ReferralCodeExpiredError()

    @staticmethod
    def _insert_account(session: Session, account: Account) -> User:
        row = User(
            username=account.username,
            email=account.email,
            password_hash=account.password_hash,
            created_at=_utc(account.created_at or utcnow()),
        )
        session.add(row)
        try:
            session.flush()
        except IntegrityError as exc:
            raise EmailAlreadyExistsError() from exc
        return row


__all__ = ["SqlAlchemyStore"]
