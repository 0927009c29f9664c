from __future__ import annotations

from datetime import UTC, datetime
from typing import cast
from unittest.mock import MagicMock

import pytest
from flask import Flask

from refhub.application.use_cases.users.login_user import LoginUserUseCase
from refhub.application.use_cases.users.register_user import RegisterUserUseCase
from refhub.domain.referrals.exceptions import InvalidReferralCodeError
from refhub.domain.users.entities import Account
from refhub.domain.users.exceptions import EmailAlreadyExistsError, InvalidCredentialsError
from refhub.interfaces.http.controllers.auth_controller import AuthController
from refhub.shared.middleware.error_handler import configure_error_handling


def _account(account_id: int, username: str, email: str) -> Account:
    return Account(
        id=account_id,
        username=username,
        email=email,
        password_hash="hash",
        created_at=datetime.now(UTC),
    )


@pytest.fixture()
def flask_app() -> Flask:
    app = Flask(__name__)
    configure_error_handling(app)
    return app


def _register(flask_app: Flask, register=None, login=None) -> None:
    controller = AuthController(
        register_use_case=cast(RegisterUserUseCase, register or MagicMock()),
        login_use_case=cast(LoginUserUseCase, login or MagicMock()),
    )
    flask_app.register_blueprint(controller.as_blueprint())


def test_register_endpoint_returns_id(flask_app: Flask) -> None:
    called: dict[str, tuple[str, str, str]] = {}

    class StubRegister:
        def execute(self, deadline, username: str, email: str, password: str) -> Account:
            called["args"] = (username, email, password)
            return _account(1, username, email)

    _register(flask_app, register=StubRegister())

    with flask_app.test_client() as client:
        response = client.post(
            "/api/auth/register",
            json={"username": "alice", "email": "alice@example.com", "password": "pw1"},
        )

    assert response.status_code == 201
    assert response.get_json() == {"id": 1}
    assert called["args"] == ("alice", "alice@example.com", "pw1")


@pytest.mark.parametrize(
    "payload",
    [
        {},
        {"username": "alice", "password": "pw1"},
        {"username": "alice", "email": "not-an-email", "password": "pw1"},
        {"username": "  ", "email": "alice@example.com", "password": "pw1"},
        {"username": "alice", "email": "alice@example.com", "password": ""},
        {"username": "a" * 51, "email": "alice@example.com", "password": "pw1"},
    ],
)
def test_register_invalid_payload_returns_422(flask_app: Flask, payload: dict) -> None:
    register = MagicMock()
    _register(flask_app, register=register)

    with flask_app.test_client() as client:
        response = client.post("/api/auth/register", json=payload)

    assert response.status_code == 422
    assert response.get_json()["error"] == "validation_error"
    register.execute.assert_not_called()


def test_register_duplicate_email_returns_409(flask_app: Flask) -> None:
    register = MagicMock()
    register.execute.side_effect = EmailAlreadyExistsError()
    _register(flask_app, register=register)

    with flask_app.test_client() as client:
        response = client.post(
            "/api/auth/register",
            json={"username": "alice", "email": "alice@example.com", "password": "pw1"},
        )

    assert response.status_code == 409
    assert response.get_json() == {"error": "email_already_exists"}


def test_register_with_referral_passes_code(flask_app: Flask) -> None:
    register = MagicMock()
    register.execute_with_referral.return_value = _account(2, "bob", "bob@example.com")
    _register(flask_app, register=register)

    with flask_app.test_client() as client:
        response = client.post(
            "/api/auth/register-with-referral",
            json={
                "referral_code": "REF1",
                "user": {"username": "bob", "email": "bob@example.com", "password": "pw2"},
            },
        )

    assert response.status_code == 201
    assert response.get_json() == {"id": 2}
    args = register.execute_with_referral.call_args.args
    assert args[1:] == ("REF1", "bob", "bob@example.com", "pw2")


def test_register_with_invalid_referral_returns_400(flask_app: Flask) -> None:
    register = MagicMock()
    register.execute_with_referral.side_effect = InvalidReferralCodeError()
    _register(flask_app, register=register)

    with flask_app.test_client() as client:
        response = client.post(
            "/api/auth/register-with-referral",
            json={
                "referral_code": "NOPE",
                "user": {"username": "bob", "email": "bob@example.com", "password": "pw2"},
            },
        )

    assert response.status_code == 400
    assert response.get_json() == {"error": "invalid_referral_code"}


def test_login_returns_token(flask_app: Flask) -> None:
    login = MagicMock()
    login.execute.return_value = "signed.jwt.token"
    _register(flask_app, login=login)

    with flask_app.test_client() as client:
        response = client.post(
            "/api/auth/login", json={"email": "alice@example.com", "password": "pw1"}
        )

    assert response.status_code == 200
    assert response.get_json() == {"token": "signed.jwt.token"}


def test_login_invalid_payload_returns_422(flask_app: Flask) -> None:
    _register(flask_app)

    with flask_app.test_client() as client:
        response = client.post("/api/auth/login", json={"username": "a"})

    assert response.status_code == 422
    payload = response.get_json()
    assert payload["error"] == "validation_error"
    assert "email" in payload["context"]["fields"]


def test_login_bad_credentials_returns_401(flask_app: Flask) -> None:
    login = MagicMock()
    login.execute.side_effect = InvalidCredentialsError()
    _register(flask_app, login=login)

    with flask_app.test_client() as client:
        response = client.post(
            "/api/auth/login", json={"email": "alice@example.com", "password": "wrong"}
        )

    assert response.status_code == 401
    assert response.get_json() == {"error": "invalid_credentials"}


def test_unexpected_error_is_masked(flask_app: Flask) -> None:
    login = MagicMock()
    login.execute.side_effect = RuntimeError("boom")
    _register(flask_app, login=login)

    with flask_app.test_client() as client:
        response = client.post(
            "/api/auth/login", json={"email": "alice@example.com", "password": "pw1"}
        )

    assert response.status_code == 500
    assert response.get_json() == {"error": "internal_error"}
