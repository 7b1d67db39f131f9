# tests/integration/test_auth_api.py
from __future__ import annotations

from datetime import timedelta

import pytest
from freezegun import freeze_time

BASE = "/api/v1/auth"

ALICE = {
    "userName": "alice",
    "email": "alice@example.com",
    "phone": "111",
    "password": "hunter2",
}


def _register(client, **overrides):
    return client.post(f"{BASE}/register", json={**ALICE, **overrides})


def _introspect(client, token) -> bool:
    response = client.post(f"{BASE}/introspect", json={"token": token})
    assert response.status_code == 200
    return response.get_json()["data"]["valid"]


# ------------------------------ Register ---------------------------------- #
def test_register_returns_token(client, roles):
    response = _register(client, fullName="Alice Liddell", address="1 Rabbit Hole")

    assert response.status_code == 201
    body = response.get_json()["data"]
    assert body["authenticated"] is True
    assert body["token"].count(".") == 2
    assert _introspect(client, body["token"]) is True


def test_register_duplicate_email_is_conflict(client, roles):
    _register(client)

    response = _register(client, userName="bob", phone="222")

    assert response.status_code == 409
    assert response.mimetype == "application/problem+json"
    problem = response.get_json()
    assert problem["code"] == "email_taken"
    assert problem["request_id"]


def test_register_duplicate_user_name_is_conflict(client, roles):
    _register(client)

    response = _register(client, email="other@example.com", phone="222")

    assert response.status_code == 409
    assert response.get_json()["code"] == "user_existed"


def test_register_validates_payload(client, roles):
    response = client.post(f"{BASE}/register", json={"userName": "x", "email": "nope"})

    assert response.status_code == 422
    errors = response.get_json()["details"]["errors"]
    assert {"email", "phone", "password"} <= set(errors)


def test_register_rejects_overlong_password(client, roles):
    response = _register(client, password="p" * 73)

    assert response.status_code == 422


def test_register_counts_password_length_in_bytes(client, roles):
    """Forty two-byte characters exceed bcrypt's 72-byte input."""
    response = _register(client, password="é" * 40)

    assert response.status_code == 422
    assert "password" in response.get_json()["details"]["errors"]


def test_register_accepts_multibyte_password_within_limit(client, roles):
    response = _register(client, password="é" * 36)

    assert response.status_code == 201


@pytest.mark.parametrize("field", ["userName", "phone"])
def test_register_rejects_blank_identifiers(client, roles, field):
    response = _register(client, **{field: "   "})

    assert response.status_code == 422
    assert field in response.get_json()["details"]["errors"]


def test_register_without_role_catalogue_fails_without_leaking(client):
    response = _register(client)

    assert response.status_code == 500
    assert response.get_json()["detail"] == "Unexpected error"


# -------------------------------- Login ----------------------------------- #
@pytest.mark.parametrize("identifier", ["alice", "alice@example.com", "111"])
def test_login_with_any_identifier(client, roles, identifier):
    _register(client)

    response = client.post(f"{BASE}/login", json={"userName": identifier, "password": "hunter2"})

    assert response.status_code == 200
    assert response.get_json()["data"]["authenticated"] is True


def test_login_wrong_password_is_unauthorized(client, roles):
    _register(client)

    response = client.post(f"{BASE}/login", json={"userName": "alice", "password": "nope"})

    assert response.status_code == 401
    assert response.get_json()["code"] == "password_not_correct"


def test_login_unknown_user_is_unauthorized(client):
    response = client.post(f"{BASE}/login", json={"userName": "ghost", "password": "pw"})

    assert response.status_code == 401
    assert response.get_json()["code"] == "unable_to_login"


def test_login_rejects_blank_identifier(client):
    response = client.post(f"{BASE}/login", json={"userName": "  ", "password": "pw"})

    assert response.status_code == 422
    assert "userName" in response.get_json()["details"]["errors"]


# ---------------------------- Token windows ------------------------------- #
def test_access_and_refresh_windows_over_http(client, roles):
    """Default windows: one hour access, ten hours refresh."""
    with freeze_time("2024-01-01T00:00:00Z") as frozen:
        token = _register(client).get_json()["data"]["token"]

        frozen.tick(timedelta(minutes=59))
        assert _introspect(client, token) is True

        frozen.tick(timedelta(minutes=2))
        assert _introspect(client, token) is False

        response = client.post(f"{BASE}/logout", json={"token": token})
        assert response.status_code == 204

        frozen.tick(timedelta(hours=10))
        response = client.post(f"{BASE}/logout", json={"token": token})
        assert response.status_code == 204


def test_introspect_garbage_is_invalid(client):
    assert _introspect(client, "not.a.token") is False


def test_logout_malformed_token_is_bad_request(client):
    response = client.post(f"{BASE}/logout", json={"token": "garbage"})

    assert response.status_code == 400
    assert response.get_json()["code"] == "malformed_token"


def test_logout_requires_token(client):
    response = client.post(f"{BASE}/logout", json={})

    assert response.status_code == 422


# --------------------------------- Me ------------------------------------- #
def test_me_describes_bearer_token(client, roles):
    token = _register(client).get_json()["data"]["token"]

    response = client.get(f"{BASE}/me", headers={"Authorization": f"Bearer {token}"})

    assert response.status_code == 200
    body = response.get_json()["data"]
    assert body["userName"] == "alice"
    assert body["scope"] == "MEMBER"
    assert body["jti"]


def test_me_requires_token(client):
    response = client.get(f"{BASE}/me")

    assert response.status_code == 401
    assert response.get_json()["code"] == "unauthenticated"


def test_me_rejects_expired_access_token(client, roles):
    with freeze_time("2024-01-01T00:00:00Z") as frozen:
        token = _register(client).get_json()["data"]["token"]
        frozen.tick(timedelta(hours=2))

        response = client.get(f"{BASE}/me", headers={"Authorization": f"Bearer {token}"})

    assert response.status_code == 401
    assert response.get_json()["detail"] == "Token has expired"


def test_me_rejects_token_with_foreign_signature(client, roles):
    token = _register(client).get_json()["data"]["token"]
    header, payload, _ = token.split(".")

    forged = f"{header}.{payload}.AAAA"

    response = client.get(f"{BASE}/me", headers={"Authorization": f"Bearer {forged}"})

    assert response.status_code == 401
    assert response.get_json()["code"] == "unauthenticated"
