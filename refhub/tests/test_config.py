from __future__ import annotations

import pytest

from refhub.shared.config import AppConfig, AuthConfig, DatabaseConfig, SecurityConfig


def test_defaults(monkeypatch) -> None:
    for name in ("DATABASE_URL", "JWT_SECRET", "TOKEN_TTL_SECONDS", "REQUEST_TIMEOUT_SECONDS"):
        monkeypatch.delenv(name, raising=False)

    config = AppConfig()

    assert config.request_timeout_seconds == 5.0
    assert config.auth.token_ttl_seconds == 24 * 60 * 60
    assert config.auth.password_hash_method == "scrypt"
    assert config.referrals.code_length == 8
    assert config.database.url.startswith("sqlite")


def test_groups_read_environment(monkeypatch) -> None:
    monkeypatch.setenv("DATABASE_URL", "sqlite:///elsewhere.db")
    monkeypatch.setenv("JWT_SECRET", "s" * 40)
    monkeypatch.setenv("TOKEN_TTL_SECONDS", "3600")
    monkeypatch.setenv("ALLOWED_ORIGINS", "https://a.example, https://b.example")

    config = AppConfig()

    assert config.database.url == "sqlite:///elsewhere.db"
    assert config.auth.jwt_secret == "s" * 40
    assert config.auth.token_ttl_seconds == 3600
    assert config.security.allowed_origins == ["https://a.example", "https://b.example"]


def test_production_refuses_weak_secret() -> None:
    with pytest.raises(SystemExit):
        AppConfig(app_env="production", auth=AuthConfig(jwt_secret="dev"))


def test_production_accepts_strong_secret() -> None:
    config = AppConfig(
        app_env="production",
        auth=AuthConfig(jwt_secret="p" * 48),
        database=DatabaseConfig(url="postgresql://db/refhub"),
        security=SecurityConfig(allowed_origins=["https://app.example"], enable_hsts=True),
    )

    assert config.is_production()


def test_single_allowed_origin_from_environment(monkeypatch) -> None:
    monkeypatch.setenv("ALLOWED_ORIGINS", "https://app.example")

    assert SecurityConfig().allowed_origins == ["https://app.example"]
