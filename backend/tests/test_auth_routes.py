# backend/tests/test_auth_routes.py

import pytest
from fastapi.testclient import TestClient

from chickcare.main import app


@pytest.fixture
def anon_client():
    app.dependency_overrides.clear()
    return TestClient(app)


def _register(client, username="henrietta", email="henrietta@example.com", password="Cluck!Cluck1"):
    return client.post("/auth/register", json={"username": username, "email": email, "password": password})


def test_register_login_me_refresh(anon_client):
    r = _register(anon_client)
    assert r.status_code == 201, r.text
    assert r.json()["username"] == "henrietta"
    assert "password_hash" not in r.json()

    r = anon_client.post("/auth/login", json={"identifier": "Henrietta", "password": "Cluck!Cluck1"})
    assert r.status_code == 200, r.text
    tokens = r.json()
    assert tokens["token_type"] == "bearer"

    me = anon_client.get("/auth/me", headers={"Authorization": f"Bearer {tokens['access_token']}"})
    assert me.status_code == 200
    assert me.json()["email"] == "henrietta@example.com"

    refreshed = anon_client.post("/auth/refresh", json={"refresh_token": tokens["refresh_token"]})
    assert refreshed.status_code == 200
    assert refreshed.json()["access_token"]

    # Un access token n'est pas un refresh token
    r = anon_client.post("/auth/refresh", json={"refresh_token": tokens["access_token"]})
    assert r.status_code == 401


def test_login_with_oauth2_form(anon_client):
    _register(anon_client)
    r = anon_client.post("/auth/login", data={"username": "henrietta@example.com", "password": "Cluck!Cluck1"})
    assert r.status_code == 200
    assert r.json()["access_token"]


def test_register_rejects_weak_password_and_duplicates(anon_client):
    r = _register(anon_client, password="weakpassword")
    assert r.status_code == 400
    assert r.json()["success"] is False

    assert _register(anon_client).status_code == 201
    r = _register(anon_client, username="HENRIETTA", email="other@example.com")
    assert r.status_code == 409


def test_invalid_credentials(anon_client):
    _register(anon_client)
    r = anon_client.post("/auth/login", json={"identifier": "henrietta", "password": "Wrong!pass1"})
    assert r.status_code == 401
    assert r.json()["error"]["message"] == "Invalid credentials"


def test_protected_routes_require_token(anon_client):
    r = anon_client.get("/flocks")
    assert r.status_code == 401
    assert r.json()["error"]["code"] == "HTTP_401"
