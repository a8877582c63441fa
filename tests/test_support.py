import pytest
from httpx import AsyncClient
from tests.conftest import auth_header, make_user


@pytest.mark.anyio
async def test_send_and_list_messages(client: AsyncClient):
    user_id, token = await make_user(name="asker")
    _, other = await make_user(name="other")

    response = await client.post("/support/messages", json={"message": "Room ID missing"}, headers=auth_header(token))
    assert response.status_code == 200
    message = response.json()
    assert message["status"] == "Pending"
    assert message["user_id"] == user_id
    assert message["user_name"] == "asker"
    await client.post("/support/messages", json={"message": "Other question"}, headers=auth_header(other))

    response = await client.get("/support/messages", headers=auth_header(token))
    assert [m["message"] for m in response.json()] == ["Room ID missing"]


@pytest.mark.anyio
async def test_empty_message_rejected(client: AsyncClient):
    _, token = await make_user()
    response = await client.post("/support/messages", json={"message": "   "}, headers=auth_header(token))
    assert response.status_code == 400


@pytest.mark.anyio
async def test_defaults_when_nothing_is_configured(client: AsyncClient):
    _, token = await make_user()
    assert (await client.get("/notices", headers=auth_header(token))).json() == []
    marquee = (await client.get("/marquee", headers=auth_header(token))).json()
    assert marquee["text"]
    settings = (await client.get("/settings", headers=auth_header(token))).json()
    assert settings == {"bkash_number": "017XXXXXXXX", "nagad_number": "019XXXXXXXX"}
