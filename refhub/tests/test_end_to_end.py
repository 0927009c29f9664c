from __future__ import annotations

import pytest

from refhub.app import create_app
from refhub.infrastructure.container import Container


@pytest.fixture()
def client(app_config, engine, clock):
    container = Container(app_config, engine=engine, clock=clock)
    app = create_app(app_config, container)
    with app.test_client() as test_client:
        yield test_client


def _register(client, username: str, email: str, password: str, code: str | None = None):
    user = {"username": username, "email": email, "password": password}
    if code is None:
        return client.post("/api/auth/register", json=user)
    return client.post(
        "/api/auth/register-with-referral", json={"referral_code": code, "user": user}
    )


def _login(client, email: str, password: str) -> dict[str, str]:
    response = client.post("/api/auth/login", json={"email": email, "password": password})
    assert response.status_code == 200
    return {"Authorization": f"Bearer {response.get_json()['token']}"}


def test_health(client) -> None:
    response = client.get("/api/health")

    assert response.status_code == 200
    assert response.get_json() == {"ok": True, "database": "ok"}
    assert response.headers["X-Content-Type-Options"] == "nosniff"


def test_referral_flow(client, clock) -> None:
    response = _register(client, "alice", "alice@x.com", "pw1")
    assert response.status_code == 201
    alice_id = response.get_json()["id"]

    alice = _login(client, "alice@x.com", "pw1")
    response = client.post(
        "/api/referral-code", json={"code": "REF1", "ttl_seconds": 3600}, headers=alice
    )
    assert response.status_code == 201

    response = client.get("/api/referral-code/alice@x.com", headers=alice)
    assert response.status_code == 200
    assert response.get_json()["code"] == "REF1"

    response = _register(client, "bob", "bob@x.com", "pw2", code="REF1")
    assert response.status_code == 201
    bob_id = response.get_json()["id"]

    clock.advance(hours=2)

    response = _register(client, "carol", "carol@x.com", "pw3", code="REF1")
    assert response.status_code == 400
    assert response.get_json() == {"error": "invalid_referral_code"}

    response = client.post(
        "/api/auth/login", json={"email": "carol@x.com", "password": "pw3"}
    )
    assert response.status_code == 401

    response = client.get(f"/api/referrals/{alice_id}", headers=alice)
    assert response.status_code == 200
    assert response.get_json() == [{"id": bob_id, "username": "bob", "email": "bob@x.com"}]

    response = client.get("/api/referral-code/alice@x.com", headers=alice)
    assert response.status_code == 404


def test_referees_of_other_account_are_forbidden(client) -> None:
    alice_id = _register(client, "alice", "alice@x.com", "pw1").get_json()["id"]
    _register(client, "bob", "bob@x.com", "pw2")
    bob = _login(client, "bob@x.com", "pw2")

    response = client.get(f"/api/referrals/{alice_id}", headers=bob)

    assert response.status_code == 403
    response = client.get("/api/referral-code/alice@x.com", headers=bob)
    assert response.status_code == 403
    response = client.get("/api/referral-code/nobody@x.com", headers=bob)
    assert response.status_code == 403


def test_revoked_code_no_longer_registers(client) -> None:
    _register(client, "alice", "alice@x.com", "pw1")
    alice = _login(client, "alice@x.com", "pw1")
    issued = client.post("/api/referral-code", json={}, headers=alice).get_json()

    assert client.delete("/api/referral-code", headers=alice).status_code == 204
    response = _register(client, "bob", "bob@x.com", "pw2", code=issued["code"])

    assert response.status_code == 400
    assert client.get("/api/referral-code/alice@x.com", headers=alice).status_code == 404


def test_duplicate_registration_and_bad_login(client) -> None:
    assert _register(client, "alice", "alice@x.com", "pw1").status_code == 201
    assert _register(client, "alice", "alice@x.com", "other").status_code == 409

    response = client.post(
        "/api/auth/login", json={"email": "alice@x.com", "password": "wrong"}
    )
    assert response.status_code == 401
    assert response.get_json() == {"error": "invalid_credentials"}


def test_referral_registration_without_code(client) -> None:
    response = _register(client, "dave", "dave@x.com", "pw4", code="")

    assert response.status_code == 201
    _login(client, "dave@x.com", "pw4")
