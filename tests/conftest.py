from datetime import timedelta

import pytest

from main import app
from services.database import initialize_db_connection, create_indexes, get_db, default_id
from httpx import ASGITransport, AsyncClient
from mongomock_motor import AsyncMongoMockClient
from services.auth import create_access_token, get_password_hash
from services.rules import now_ms
from core.config import ACCESS_TOKEN_EXPIRE_MINUTES

HOUR_MS = 60 * 60 * 1000


@pytest.fixture(scope="session")
def anyio_backend():
    return "asyncio"


@pytest.fixture
def db():
    # Fresh in-memory store for every test
    initialize_db_connection(AsyncMongoMockClient())
    return get_db()


@pytest.fixture
async def client(db):
    await create_indexes()
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client


def token_for(user_id: str, role: str = "user"):
    return create_access_token(
        data={"sub": user_id, "role": role}, expires_delta=timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES)
    )


def auth_header(token: str):
    return {"Authorization": f"Bearer {token}"}


async def make_user(name="testuser", balance=0, role="user", email=None, password="testpw"):
    user_id = default_id()
    await get_db().users.insert_one({
        "_id": user_id,
        "email": email or f"{name}@ffportal.com",
        "name": name,
        "game_id": f"{name}-ff",
        "password": get_password_hash(password),
        "balance": balance,
        "role": role,
    })
    return user_id, token_for(user_id, role)


async def make_tournament(**overrides):
    tournament = {
        "_id": default_id(),
        "title": "Bermuda Clash",
        "match_type": "Squad",
        "base_entry_fee": 50,
        "per_kill": 10,
        "prize1": 500,
        "prize2": 300,
        "prize3": 100,
        "start_time": now_ms() + 2 * HOUR_MS,
        "max_players": 12,
        "joined_players": [],
        "status": None,
        "room_id": "123456",
        "room_pass": "ff55",
        "map": "Bermuda",
    }
    tournament.update(overrides)
    await get_db().tournaments.insert_one(tournament)
    return tournament["_id"]


async def get_balance(user_id: str):
    user = await get_db().users.find_one({"_id": user_id})
    return user["balance"]
