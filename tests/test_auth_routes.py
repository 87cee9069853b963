"""HTTP tests for the login endpoint."""

from unittest.mock import Mock

import pytest
from fastapi.testclient import TestClient

LOGIN_URL = "/v1/authentication/login"


@pytest.fixture
def registered(client: TestClient, api_headers: dict[str, str]) -> dict:
    response = client.post(
        "/v1/users",
        json={
            "name": "Bob",
            "email": "b@x.com",
            "password": "secret123",
            "password_confirm": "secret123",
        },
        headers=api_headers,
    )
    assert response.status_code == 201
    return response.json()


def test_login_success_returns_profile(client: TestClient, registered: dict) -> None:
    response = client.post(LOGIN_URL, json={"email": "b@x.com", "password": "secret123"})

    assert response.status_code == 200
    assert response.json() == registered


def test_login_does_not_need_api_key(client: TestClient, registered: dict) -> None:
    response = client.post(LOGIN_URL, json={"email": "b@x.com", "password": "wrong"})

    assert response.status_code == 403
    assert response.json()["error"]["code"] == "invalid_credentials"


def test_sixth_attempt_returns_429(client: TestClient, registered: dict) -> None:
    for _ in range(5):
        response = client.post(LOGIN_URL, json={"email": "b@x.com", "password": "wrong"})
        assert response.status_code == 403

    response = client.post(LOGIN_URL, json={"email": "b@x.com", "password": "secret123"})

    assert response.status_code == 429
    body = response.json()
    assert body["error"]["code"] == "too_many_attempts"
    assert body["error"]["details"]["retry_after"] == 1800
    assert response.headers["Retry-After"] == "1800"


def test_lockout_lifts_after_window(client: TestClient, registered: dict, clock: Mock) -> None:
    for _ in range(5):
        client.post(LOGIN_URL, json={"email": "b@x.com", "password": "wrong"})

    clock.return_value += 1800

    response = client.post(LOGIN_URL, json={"email": "b@x.com", "password": "secret123"})
    assert response.status_code == 200


def test_lockout_is_per_email(client: TestClient, registered: dict) -> None:
    for _ in range(5):
        client.post(LOGIN_URL, json={"email": "other@x.com", "password": "wrong"})

    response = client.post(LOGIN_URL, json={"email": "b@x.com", "password": "secret123"})
    assert response.status_code == 200


def test_login_body_validation(client: TestClient) -> None:
    response = client.post(LOGIN_URL, json={"email": "b@x.com"})

    assert response.status_code == 422
