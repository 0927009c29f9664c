# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Database unit of work implementation."""

from __future__ import annotations

from collections.abc import Callable
from contextlib import AbstractContextManager
from dataclasses import dataclass, field
from typing import Protocol

from sqlalchemy import text
from sqlalchemy.orm import Session

from refhub.shared.deadline import Deadline
from refhub.shared.errors.base import StoreTimeoutError
from refhub.shared.logging import logger


class UnitOfWork(Protocol):
    """Unit of work protocol for transactional operations."""

    def __enter__(self) -> UnitOfWork: ...

    def __exit__(self, exc_type, exc, tb) -> None: ...

    @property
    def session(self) -> Session: ...

    def commit(self) -> None: ...

    def rollback(self) -> None: ...


@dataclass(slots=True)
class SqlAlchemyUnitOfWork(AbstractContextManager, UnitOfWork):
    """SQLAlchemy-backed unit of work bounded by a deadline.

    Commits on clean exit, rolls back on any exception, and refuses to commit
    once the deadline has passed.
    """

    session_factory: Callable[[], Session]
    deadline: Deadline
    operation: str = "uow"
    _session: Session | None = field(default=None, init=False, repr=False)

    def __enter__(self) -> SqlAlchemyUnitOfWork:
        self.deadline.check(self.operation)
        self._session = self.session_factory()
        logger.debug(f"uow[{self.operation}]: session opened")
        try:
            self._apply_statement_timeout(self._session)
        except Exception:
            self._session.close()
            self._session = None
            raise
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        assert self._session is not None
        try:
            if exc:
                logger.debug(f"uow[{self.operation}]: rollback due to {exc_type.__name__}")
                self._session.rollback()
            elif self.deadline.expired():
                logger.warning(f"uow[{self.operation}]: deadline passed before commit, rolling back")
                self._session.rollback()
                raise StoreTimeoutError()
            else:
                self._session.commit()
                logger.debug(f"uow[{self.operation}]: committed")
        except StoreTimeoutError:
            raise
        except Exception:
            logger.exception(f"uow[{self.operation}]: exception while finalising")
            self._session.rollback()
            raise
        finally:
            self._session.close()
            logger.debug(f"uow[{self.operation}]: session closed")
            self._session = None

    @property
    def session(self) -> Session:
        if self._session is None:
            msg = "UnitOfWork session accessed before entering context"
            raise RuntimeError(msg)
        return self._session

    def commit(self) -> None:
        if self._session is None:
            raise RuntimeError("UnitOfWork not started")
        self.deadline.check(self.operation)
        self._session.commit()
        logger.debug(f"uow[{self.operation}]: manual commit")

    def rollback(self) -> None:
        if self._session is None:
            return
        self._session.rollback()
        logger.debug(f"uow[{self.operation}]: manual rollback")

    def _apply_statement_timeout(self, session: Session) -> None:
        dialect = session.get_bind().dialect.name
        millis = max(int(self.deadline.remaining() * 1000), 1)
        if dialect == "postgresql":
            session.execute(
                text("SELECT set_config('statement_timeout', :ms, true)"),
                {"ms": str(millis)},
            )
        elif dialect == "sqlite":
            # Lock waits are bounded by the busy timeout, not by statements.
            session.execute(text(f"PRAGMA busy_timeout = {millis}"))
