import pytest
from httpx import AsyncClient
from services.database import get_db
from services.rules import now_ms
from tests.conftest import HOUR_MS, auth_header, get_balance, make_tournament, make_user

new_tournament = {
    "title": "Kalahari Cup",
    "match_type": "Duo",
    "base_entry_fee": 30,
    "per_kill": 5,
    "prize1": 400,
    "prize2": 200,
    "prize3": 100,
    "max_players": 24,
    "map": "Kalahari",
}


@pytest.mark.anyio
async def test_admin_routes_need_admin_role(client: AsyncClient):
    _, token = await make_user()
    response = await client.get("/admin/transactions", headers=auth_header(token))
    assert response.status_code == 403
    response = await client.post("/admin/tournaments", json={**new_tournament, "start_time": now_ms()},
                                 headers=auth_header(token))
    assert response.status_code == 403


@pytest.mark.anyio
async def test_create_and_update_tournament(client: AsyncClient):
    _, admin = await make_user(name="boss", role="admin")
    response = await client.post("/admin/tournaments", json={**new_tournament, "start_time": now_ms() + HOUR_MS},
                                 headers=auth_header(admin))
    assert response.status_code == 200
    tournament = response.json()["tournament"]
    assert tournament["joined_players"] == []
    assert tournament["status"] is None
    tournament_id = tournament["_id"]

    response = await client.patch(f"/admin/tournaments/{tournament_id}",
                                  json={"room_id": "7777", "room_pass": "abc", "status": "Finished"},
                                  headers=auth_header(admin))
    assert response.status_code == 200
    assert response.json()["tournament"]["room_id"] == "7777"

    card = (await client.get(f"/tournaments/{tournament_id}", headers=auth_header(admin))).json()
    assert card["derived_status"] == "Finished"
    assert card["join_state"] == "closed"

    response = await client.patch("/admin/tournaments/missing", json={"title": "x"}, headers=auth_header(admin))
    assert response.status_code == 404


@pytest.mark.anyio
async def test_record_results_and_delete(client: AsyncClient):
    _, admin = await make_user(name="boss", role="admin")
    tournament_id = await make_tournament(joined_players=[
        {"user_id": "u1", "names": ["A"], "participation_type": "Solo"},
        {"user_id": "u2", "names": ["B"], "participation_type": "Solo"},
    ])
    response = await client.put(f"/admin/tournaments/{tournament_id}/results",
                                json={"results": [{"user_id": "u2", "kills": 7, "rank": 1}]},
                                headers=auth_header(admin))
    assert response.status_code == 200
    roster = response.json()["tournament"]["joined_players"]
    assert roster[1]["kills"] == 7
    assert roster[1]["rank"] == 1
    assert roster[0]["kills"] is None

    response = await client.put(f"/admin/tournaments/{tournament_id}/results",
                                json={"results": [{"user_id": "stranger", "kills": 1}]},
                                headers=auth_header(admin))
    assert response.status_code == 400

    response = await client.delete(f"/admin/tournaments/{tournament_id}", headers=auth_header(admin))
    assert response.status_code == 200
    assert await get_db().tournaments.count_documents({}) == 0


@pytest.mark.anyio
async def test_approving_deposit_does_not_credit(client: AsyncClient):
    user_id, token = await make_user(balance=0)
    _, admin = await make_user(name="boss", role="admin")
    deposit = (await client.post("/wallet/deposit", json={
        "amount": 300, "sender_number": "017", "transaction_ref": "TX9",
    }, headers=auth_header(token))).json()["transaction"]

    response = await client.patch(f"/admin/transactions/{deposit['_id']}", json={"status": "Completed"},
                                  headers=auth_header(admin))
    assert response.status_code == 200
    assert response.json()["status"] == "Completed"
    assert await get_balance(user_id) == 0

    response = await client.post(f"/admin/users/{user_id}/balance", json={"amount": 300, "note": "deposit TX9"},
                                 headers=auth_header(admin))
    assert response.status_code == 200
    assert response.json()["balance"] == 300
    manual = await get_db().transactions.find_one({"user_id": user_id, "kind": "Manual"})
    assert manual["status"] == "Completed"
    assert manual["amount"] == 300


@pytest.mark.anyio
async def test_balance_adjustment_cannot_go_negative(client: AsyncClient):
    user_id, _ = await make_user(balance=50)
    _, admin = await make_user(name="boss", role="admin")
    response = await client.post(f"/admin/users/{user_id}/balance", json={"amount": -80},
                                 headers=auth_header(admin))
    assert response.status_code == 400
    assert await get_balance(user_id) == 50

    response = await client.post(f"/admin/users/{user_id}/balance", json={"amount": 25, "kind": "Reward"},
                                 headers=auth_header(admin))
    assert response.json()["balance"] == 75

    response = await client.post(f"/admin/users/{user_id}/balance", json={"amount": 25, "kind": "Deposit"},
                                 headers=auth_header(admin))
    assert response.status_code == 400


@pytest.mark.anyio
async def test_reply_notices_settings_marquee(client: AsyncClient):
    _, token = await make_user()
    _, admin = await make_user(name="boss", role="admin")
    message = (await client.post("/support/messages", json={"message": "help"}, headers=auth_header(token))).json()

    response = await client.post(f"/admin/messages/{message['_id']}/reply", json={"reply": "done"},
                                 headers=auth_header(admin))
    assert response.json()["status"] == "Replied"
    mine = (await client.get("/support/messages", headers=auth_header(token))).json()
    assert mine[0]["reply"] == "done"

    notice = (await client.post("/admin/notices", json={"text": "Server maintenance"}, headers=auth_header(admin))).json()
    notices = (await client.get("/notices", headers=auth_header(token))).json()
    assert [n["text"] for n in notices] == ["Server maintenance"]
    await client.delete(f"/admin/notices/{notice['_id']}", headers=auth_header(admin))
    assert (await client.get("/notices", headers=auth_header(token))).json() == []

    await client.put("/admin/settings", json={"bkash_number": "01711111111", "nagad_number": "01922222222"},
                     headers=auth_header(admin))
    wallet = (await client.get("/wallet", headers=auth_header(token))).json()
    assert wallet["settings"]["bkash_number"] == "01711111111"

    await client.put("/admin/marquee", json={"text": "Weekend squad cup"}, headers=auth_header(admin))
    assert (await client.get("/marquee", headers=auth_header(token))).json() == {"text": "Weekend squad cup"}
