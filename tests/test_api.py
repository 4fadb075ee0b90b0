"""
API endpoint tests.

These tests run the real application (in-memory store backend) through
FastAPI TestClient, exercising the full register -> auth -> status ->
modify -> delete flow over HTTP.
"""

from urllib.parse import parse_qs, urlparse

import pytest
from fastapi.testclient import TestClient

from credgate.main import create_app


@pytest.fixture
def client(config_provider):
    """Test client with the service stack started via lifespan."""
    with TestClient(create_app(config_provider)) as test_client:
        yield test_client


def register_and_login(client, username="alice", password="pw1", profile_field="Engineer"):
    response = client.post(
        "/api/register",
        json={"username": username, "password": password, "profileField": profile_field},
    )
    assert response.status_code == 201
    response = client.post("/api/auth", json={"username": username, "password": password})
    assert response.status_code == 200
    return response.json()["token"]


def test_health(client):
    """Health check does not depend on the store."""
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_register(client):
    """Registration returns a confirmation without a token."""
    response = client.post("/api/register", json={"username": "alice", "password": "pw1"})

    assert response.status_code == 201
    assert response.json() == {"message": "Registration successful! You can now log in."}


def test_register_accepts_job_title_alias(client):
    """Older clients send jobTitle instead of profileField."""
    client.post(
        "/api/register", json={"username": "alice", "password": "pw1", "jobTitle": "Engineer"}
    )
    token = client.post("/api/auth", json={"username": "alice", "password": "pw1"}).json()["token"]

    response = client.get("/api/status", params={"token": token})

    assert response.json()["profileField"] == "Engineer"


def test_register_duplicate(client):
    """Duplicate usernames return 409."""
    client.post("/api/register", json={"username": "alice", "password": "pw1"})

    response = client.post("/api/register", json={"username": "alice", "password": "pw2"})

    assert response.status_code == 409
    assert response.json() == {"error": "Username already exists!"}


def test_register_missing_password(client):
    """Missing fields are a 400 in the common error shape."""
    response = client.post("/api/register", json={"username": "alice"})

    assert response.status_code == 400
    assert response.json() == {"error": "Username and password are required."}


def test_auth_invalid_credentials(client):
    """Wrong password returns 401."""
    client.post("/api/register", json={"username": "alice", "password": "pw1"})

    response = client.post("/api/auth", json={"username": "alice", "password": "nope"})

    assert response.status_code == 401
    assert response.json() == {"error": "Invalid username or password"}


def test_status(client):
    """Status echoes the token and shows the identity."""
    token = register_and_login(client)

    response = client.get("/api/status", params={"token": token})

    assert response.status_code == 200
    assert response.json() == {
        "message": "Token validated successfully",
        "name": "alice",
        "profileField": "Engineer",
        "token": token,
    }


@pytest.mark.parametrize("params", [{}, {"token": "garbage"}])
def test_status_invalid_token(client, params):
    """Missing or malformed tokens return 401."""
    response = client.get("/api/status", params=params)

    assert response.status_code == 401
    assert response.json() == {"error": "Invalid or expired token."}


def test_modify_redirects_to_status_with_new_token(client):
    """Modify answers with a redirect carrying the re-issued token."""
    token = register_and_login(client)

    response = client.post(
        "/api/modify",
        json={"token": token, "newName": "alicia", "newProfileField": "Manager"},
        follow_redirects=False,
    )

    assert response.status_code == 303
    location = urlparse(response.headers["location"])
    assert location.path == "/api/status"
    new_token = parse_qs(location.query)["token"][0]
    assert new_token != token

    status = client.get("/api/status", params={"token": new_token}).json()
    assert status["name"] == "alicia"
    assert status["profileField"] == "Manager"

    stale = client.get("/api/status", params={"token": token})
    assert stale.status_code == 401


def test_modify_followed_redirect(client):
    """Following the redirect lands on the status of the modified identity."""
    token = register_and_login(client)

    response = client.post("/api/modify", json={"token": token, "newJobTitle": "CTO"})

    assert response.status_code == 200
    assert response.json()["profileField"] == "CTO"


def test_modify_rename_conflict(client):
    """Renaming onto an existing username returns 409."""
    token = register_and_login(client)
    client.post("/api/register", json={"username": "bob", "password": "pw2"})

    response = client.post(
        "/api/modify", json={"token": token, "newName": "bob"}, follow_redirects=False
    )

    assert response.status_code == 409


def test_delete_requires_confirmation(client):
    """Unconfirmed delete returns 400, even without a token."""
    response = client.post("/api/delete", json={})

    assert response.status_code == 400
    assert response.json() == {"error": "You must confirm user deletion."}


def test_delete(client):
    """Confirmed delete removes the identity."""
    token = register_and_login(client)

    response = client.post("/api/delete", json={"token": token, "confirm": True})

    assert response.status_code == 200
    assert response.json() == {"message": "User deleted successfully."}
    assert client.get("/api/status", params={"token": token}).status_code == 401
    login = client.post("/api/auth", json={"username": "alice", "password": "pw1"})
    assert login.status_code == 401


def test_delete_accepts_checkbox_value(client):
    """A checked HTML checkbox posts confirm=on."""
    token = register_and_login(client)

    response = client.post("/api/delete", data={"token": token, "confirm": "on"})

    assert response.status_code == 200
    assert response.json() == {"message": "User deleted successfully."}


def test_delete_form_without_checkbox(client):
    """An unchecked checkbox is simply absent from the form."""
    token = register_and_login(client)

    response = client.post("/api/delete", data={"token": token})

    assert response.status_code == 400
    assert response.json() == {"error": "You must confirm user deletion."}
    assert client.get("/api/status", params={"token": token}).status_code == 200


def test_service_not_initialized(config_provider):
    """Requests outside the lifespan get 503."""
    client = TestClient(create_app(config_provider))

    response = client.post("/api/auth", json={"username": "alice", "password": "pw1"})

    assert response.status_code == 503
    assert response.json() == {"error": "Service temporarily unavailable."}


def test_form_encoded_account_flow(client):
    """The HTML forms post urlencoded bodies with the original field names."""
    response = client.post(
        "/api/register", data={"username": "alice", "password": "pw1", "jobTitle": "Engineer"}
    )
    assert response.status_code == 201

    response = client.post("/api/auth", data={"username": "alice", "password": "pw1"})
    assert response.status_code == 200
    token = response.json()["token"]

    response = client.post(
        "/api/modify",
        data={"token": token, "newName": "alicia", "newJobTitle": "CTO"},
        follow_redirects=False,
    )
    assert response.status_code == 303
    new_token = parse_qs(urlparse(response.headers["location"]).query)["token"][0]

    status = client.get("/api/status", params={"token": new_token}).json()
    assert status["name"] == "alicia"
    assert status["profileField"] == "CTO"


def test_form_empty_profile_field_is_not_stored(client):
    """An empty form input means no profile field."""
    client.post("/api/register", data={"username": "alice", "password": "pw1", "jobTitle": ""})
    token = client.post("/api/auth", data={"username": "alice", "password": "pw1"}).json()["token"]

    assert client.get("/api/status", params={"token": token}).json()["profileField"] is None


def test_auth_missing_fields(client):
    """Missing credentials are rejected like wrong ones."""
    response = client.post("/api/auth", data={"username": "alice"})

    assert response.status_code == 401
    assert response.json() == {"error": "Invalid username or password"}


def test_modify_missing_token(client):
    response = client.post("/api/modify", json={"newName": "x"}, follow_redirects=False)

    assert response.status_code == 401
    assert response.json() == {"error": "Invalid or expired token."}


def test_malformed_json_body(client):
    response = client.post(
        "/api/register", content=b"{not json", headers={"content-type": "application/json"}
    )

    assert response.status_code == 400
    assert response.json()["error"].startswith("Invalid request")


@pytest.mark.parametrize("body", [{"username": 123, "password": "pw1"}, ["alice", "pw1"]])
def test_invalid_body_types(client, body):
    """Bodies that do not fit the request model are 400 in the common error shape."""
    response = client.post("/api/register", json=body)

    assert response.status_code == 400
    assert set(response.json()) == {"error"}
    assert response.json()["error"].startswith("Invalid request")
