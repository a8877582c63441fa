from unittest.mock import patch

import pytest
from httpx import AsyncClient
from services.auth import normalize_handle
from services.database import get_db

registration = {"handle": "player1", "password": "secret1", "name": "Player One", "game_id": "55443322"}


def test_normalize_handle():
    assert normalize_handle("player1") == "player1@ffportal.com"
    assert normalize_handle(" Player1@Mail.com ") == "player1@mail.com"


@pytest.mark.anyio
async def test_register_user(client: AsyncClient):
    response = await client.post("/register", json=registration)
    assert response.status_code == 200
    data = response.json()
    assert "access_token" in data
    assert data["user"]["email"] == "player1@ffportal.com"
    assert data["user"]["balance"] == 0
    assert data["user"]["role"] == "user"
    assert "password" not in data["user"]

    stored = await get_db().users.find_one({"email": "player1@ffportal.com"})
    assert stored["name"] == "Player One"
    assert stored["password"] != "secret1"


@pytest.mark.anyio
async def test_register_duplicate(client: AsyncClient):
    await client.post("/register", json=registration)
    response = await client.post("/register", json=registration)
    assert response.status_code == 400
    assert response.json()["detail"] == "This user ID is already in use."


@pytest.mark.anyio
@pytest.mark.parametrize("override", [{"password": "12345"}, {"name": " "}, {"game_id": ""}, {"handle": ""}])
async def test_register_validation(client: AsyncClient, override):
    response = await client.post("/register", json={**registration, **override})
    assert response.status_code == 400
    assert await get_db().users.count_documents({}) == 0


@pytest.mark.anyio
async def test_register_admin_email(client: AsyncClient):
    with patch("services.auth.ADMIN_EMAILS", ["boss@ffportal.com"]):
        response = await client.post("/register", json={**registration, "handle": "boss"})
    assert response.json()["user"]["role"] == "admin"


@pytest.mark.anyio
async def test_login_user(client: AsyncClient):
    await client.post("/register", json=registration)
    response = await client.post("/token", json={"handle": "player1", "password": "secret1"})
    assert response.status_code == 200
    assert "access_token" in response.json()

    response = await client.post("/token", json={"handle": "player1@ffportal.com", "password": "secret1"})
    assert response.status_code == 200


@pytest.mark.anyio
async def test_login_wrong_password(client: AsyncClient):
    await client.post("/register", json=registration)
    response = await client.post("/token", json={"handle": "player1", "password": "wrong!"})
    assert response.status_code == 401
    assert response.json()["detail"] == "Incorrect user ID or password"


@pytest.mark.anyio
@patch("routes.auth.verify_google_token")
async def test_google_login_creates_profile_once(mock_verify_google_token, client: AsyncClient):
    mock_verify_google_token.return_value = {"email": "gamer@gmail.com", "name": "Gamer"}
    response = await client.post("/google-login", json={"accessToken": "mock_code"})
    assert response.status_code == 200
    user = response.json()["user"]
    assert user["name"] == "Gamer"
    assert user["game_id"] == "SET_ID"
    assert user["balance"] == 0

    await get_db().users.update_one({"email": "gamer@gmail.com"}, {"$set": {"balance": 70}})
    response = await client.post("/google-login", json={"accessToken": "mock_code"})
    assert response.json()["user"]["balance"] == 70
    assert await get_db().users.count_documents({"email": "gamer@gmail.com"}) == 1


@pytest.mark.anyio
@patch("routes.auth.verify_google_token")
async def test_google_login_invalid_token(mock_verify_google_token, client: AsyncClient):
    mock_verify_google_token.side_effect = ValueError("bad token")
    response = await client.post("/google-login", json={"accessToken": "mock_code"})
    assert response.status_code == 400


@pytest.mark.anyio
async def test_invalid_token_is_rejected(client: AsyncClient):
    response = await client.get("/users/me", headers={"Authorization": "Bearer not-a-token"})
    assert response.status_code == 401


@pytest.mark.anyio
async def test_missing_token_is_rejected_before_routing(client: AsyncClient):
    response = await client.get("/users/me")
    assert response.status_code == 401
    assert response.json()["detail"] == "Not authenticated"

    response = await client.get("/users/me", headers={"Authorization": "Bearer not-a-token"})
    assert response.json()["detail"] == "Could not validate credentials"
