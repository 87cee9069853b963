"""HTTP tests for the users resource."""

import pytest
from fastapi.testclient import TestClient


def _create(client: TestClient, headers: dict[str, str], name: str, email: str) -> dict:
    response = client.post(
        "/v1/users",
        json={
            "name": name,
            "email": email,
            "password": "secret123",
            "password_confirm": "secret123",
        },
        headers=headers,
    )
    assert response.status_code == 201, response.text
    return response.json()


@pytest.fixture
def people(client: TestClient, api_headers: dict[str, str]) -> list[dict]:
    return [
        _create(client, api_headers, "John", "john@x.com"),
        _create(client, api_headers, "Joan", "joan@x.com"),
        _create(client, api_headers, "Mark", "mark@x.com"),
    ]


def test_requires_api_key(client: TestClient) -> None:
    response = client.get("/v1/users")

    assert response.status_code == 403
    assert response.json()["error"]["code"] == "missing_api_key"


def test_rejects_unknown_api_key(client: TestClient) -> None:
    response = client.get("/v1/users", headers={"X-API-Key": "nope"})

    assert response.status_code == 403
    assert response.json()["error"]["code"] == "invalid_api_key"


def test_list_envelope(client: TestClient, api_headers: dict[str, str], people: list[dict]) -> None:
    response = client.get(
        "/v1/users",
        params={"page_number": "1", "page_size": "2", "sort": "name:asc"},
        headers=api_headers,
    )

    assert response.status_code == 200
    body = response.json()
    assert body["page_number"] == 1
    assert body["page_size"] == 2
    assert body["count"] == 2
    assert body["total_pages"] == 2
    assert body["has_previous_page"] is False
    assert body["has_next_page"] is True
    assert [u["name"] for u in body["data"]] == ["Joan", "John"]
    assert set(body["data"][0]) == {"id", "name", "email"}


def test_list_uses_default_page_size(
    client: TestClient, api_headers: dict[str, str], people: list[dict]
) -> None:
    body = client.get("/v1/users", headers=api_headers).json()

    assert body["page_number"] == 1
    assert body["page_size"] == 10
    assert body["count"] == 3


def test_search_is_case_insensitive(
    client: TestClient, api_headers: dict[str, str], people: list[dict]
) -> None:
    body = client.get("/v1/users", params={"search": "name:JO"}, headers=api_headers).json()

    assert sorted(u["name"] for u in body["data"]) == ["Joan", "John"]


@pytest.mark.parametrize(
    "params",
    [
        {"search": "nocolon"},
        {"sort": "nocolon"},
        {"search": "password:$argon2id$"},
        {"sort": "password:asc"},
        {"page_size": "0"},
        {"page_number": "abc"},
    ],
)
def test_invalid_query_returns_400(
    client: TestClient, api_headers: dict[str, str], params: dict[str, str]
) -> None:
    response = client.get("/v1/users", params=params, headers=api_headers)

    assert response.status_code == 400
    assert response.json()["error"]["code"] == "invalid_query"


def test_listed_user_round_trips(
    client: TestClient, api_headers: dict[str, str], people: list[dict]
) -> None:
    listed = client.get("/v1/users", headers=api_headers).json()["data"]

    for user in listed:
        fetched = client.get(f"/v1/users/{user['id']}", headers=api_headers)
        assert fetched.status_code == 200
        assert fetched.json() == user


def test_duplicate_email_returns_409(
    client: TestClient, api_headers: dict[str, str], people: list[dict]
) -> None:
    response = client.post(
        "/v1/users",
        json={
            "name": "John Again",
            "email": "john@x.com",
            "password": "secret123",
            "password_confirm": "secret123",
        },
        headers=api_headers,
    )

    assert response.status_code == 409
    assert response.json()["error"]["code"] == "email_already_registered"


def test_password_confirmation_mismatch(client: TestClient, api_headers: dict[str, str]) -> None:
    response = client.post(
        "/v1/users",
        json={
            "name": "Ann",
            "email": "a@x.com",
            "password": "secret123",
            "password_confirm": "secret124",
        },
        headers=api_headers,
    )

    assert response.status_code == 422


def test_update_and_delete(client: TestClient, api_headers: dict[str, str], people: list[dict]) -> None:
    user_id = people[0]["id"]

    response = client.put(
        f"/v1/users/{user_id}",
        json={"name": "Johnny", "email": "johnny@x.com"},
        headers=api_headers,
    )
    assert response.status_code == 200
    assert response.json()["name"] == "Johnny"

    response = client.delete(f"/v1/users/{user_id}", headers=api_headers)
    assert response.status_code == 200
    assert response.json() == {"id": user_id}

    response = client.get(f"/v1/users/{user_id}", headers=api_headers)
    assert response.status_code == 404
    assert response.json()["error"]["code"] == "user_not_found"


def test_change_password(client: TestClient, api_headers: dict[str, str], people: list[dict]) -> None:
    user_id = people[2]["id"]

    response = client.patch(
        f"/v1/users/{user_id}/change-password",
        json={"old_password": "secret123", "new_password": "fresh-pass", "password_confirm": "fresh-pass"},
        headers=api_headers,
    )
    assert response.status_code == 200

    login = client.post(
        "/v1/authentication/login",
        json={"email": "mark@x.com", "password": "fresh-pass"},
    )
    assert login.status_code == 200


def test_change_password_wrong_old_password(
    client: TestClient, api_headers: dict[str, str], people: list[dict]
) -> None:
    response = client.patch(
        f"/v1/users/{people[2]['id']}/change-password",
        json={"old_password": "guess", "new_password": "fresh-pass", "password_confirm": "fresh-pass"},
        headers=api_headers,
    )

    assert response.status_code == 403
    assert response.json()["error"]["code"] == "wrong_password"
