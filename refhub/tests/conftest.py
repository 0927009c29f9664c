from __future__ import annotations

from datetime import UTC, datetime, timedelta

import pytest
from sqlalchemy.engine import Engine

from refhub.application.services.password_hashing import WerkzeugPasswordHasher
from refhub.application.services.session_tokens import JwtSessionTokenService
from refhub.domain.users.entities import Account
from refhub.infrastructure.db import build_engine, build_session_factory, init_db
from refhub.infrastructure.store.sqlalchemy_store import SqlAlchemyStore
from refhub.shared.config import AppConfig, AuthConfig, DatabaseConfig
from refhub.shared.deadline import Deadline

TEST_SECRET = "test-secret-that-is-long-enough-for-hs256"
FAST_HASH_METHOD = "pbkdf2:sha256:1000"


class FakeClock:
    def __init__(self, start: datetime | None = None) -> None:
        self.now = start or datetime(2025, 3, 1, 12, 0, tzinfo=UTC)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs: float) -> None:
        self.now += timedelta(**kwargs)


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def deadline() -> Deadline:
    return Deadline.after(5.0)


@pytest.fixture()
def hasher() -> WerkzeugPasswordHasher:
    return WerkzeugPasswordHasher(FAST_HASH_METHOD)


@pytest.fixture()
def engine() -> Engine:
    engine = build_engine(DatabaseConfig(url="sqlite://"))
    init_db(engine)
    yield engine
    engine.dispose()


@pytest.fixture()
def file_engine(tmp_path) -> Engine:
    engine = build_engine(DatabaseConfig(url=f"sqlite:///{tmp_path / 'refhub.db'}"))
    init_db(engine)
    yield engine
    engine.dispose()


@pytest.fixture()
def store(engine: Engine) -> SqlAlchemyStore:
    return SqlAlchemyStore(build_session_factory(engine))


@pytest.fixture()
def app_config() -> AppConfig:
    return AppConfig(
        app_env="test",
        database=DatabaseConfig(url="sqlite://"),
        auth=AuthConfig(jwt_secret=TEST_SECRET, password_hash_method=FAST_HASH_METHOD),
    )


@pytest.fixture()
def new_account():
    def _make(email: str, username: str | None = None, password_hash: str = "x$y$z") -> Account:
        return Account(
            id=0,
            username=username or email.split("@")[0],
            email=email,
            password_hash=password_hash,
        )

    return _make


@pytest.fixture()
def tokens() -> JwtSessionTokenService:
    return JwtSessionTokenService(TEST_SECRET)
