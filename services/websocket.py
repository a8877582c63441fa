import json
import logging
from typing import Dict, List, Optional

from fastapi import WebSocket
from fastapi.encoders import jsonable_encoder

from models.user import Role, UserInDB, UserProfile
from services.rules import now_ms
from services.support import get_all_messages, get_marquee, get_notices, get_user_messages
from services.tournament import get_all_tournaments
from services.user import get_user
from services.views import tournament_card
from services.wallet import get_all_transactions, get_settings, get_user_transactions

logger = logging.getLogger(__name__)

COLLECTIONS = ["tournaments", "transactions", "messages", "notices", "settings", "marquee", "profile"]


class ConnectionManager:
    def __init__(self):
        self.online_users: Dict[str, List[WebSocket]] = {}

    async def connect(self, websocket: WebSocket, user_id: str):
        await websocket.accept()
        self.online_users.setdefault(user_id, []).append(websocket)
        logger.info("Feed connected for %s", user_id)

    def disconnect(self, websocket: WebSocket, user_id: str):
        sockets = self.online_users.get(user_id, [])
        if websocket in sockets:
            sockets.remove(websocket)
        if not sockets:
            self.online_users.pop(user_id, None)

    async def close_user(self, user_id: str):
        for websocket in list(self.online_users.get(user_id, [])):
            self.disconnect(websocket, user_id)
            await websocket.close()

    async def send_personal_message(self, message: dict, websocket: WebSocket):
        await websocket.send_json(message)

    async def send_to_user(self, user_id: str, message: dict):
        for websocket in list(self.online_users.get(user_id, [])):
            try:
                await self.send_personal_message(message, websocket)
            except Exception as error:
                # A dead socket must not fail the write that triggered the push
                logger.warning("Dropping feed socket of %s: %r", user_id, error)
                self.disconnect(websocket, user_id)

    async def handle_message(self, message: str, websocket: WebSocket, user_id: str):
        try:
            json_decoded = json.loads(message)
            message_type = json_decoded.get("type")

            if message_type == "refresh":
                user = await get_user(user_id)
                if user is None:
                    await self.send_personal_message({"type": "error", "msg": "Unknown user"}, websocket)
                    return
                for collection in COLLECTIONS:
                    snapshot = await build_snapshot(collection, user)
                    await self.send_personal_message(snapshot, websocket)
            else:
                await self.send_personal_message({"type": "error", "msg": "Unknown message type"}, websocket)
        except (json.JSONDecodeError, AttributeError):
            await self.send_personal_message({"type": "error", "msg": "Invalid JSON format"}, websocket)


manager = ConnectionManager()


async def build_snapshot(collection: str, user: UserInDB) -> dict:
    """Full replacement value of one collection as this user may see it."""
    is_admin = user.role == Role.admin
    if collection == "tournaments":
        now = now_ms()
        data = [tournament_card(tournament, user, now) for tournament in await get_all_tournaments()]
    elif collection == "transactions":
        data = await get_all_transactions() if is_admin else await get_user_transactions(user.id)
    elif collection == "messages":
        data = await get_all_messages() if is_admin else await get_user_messages(user.id)
    elif collection == "notices":
        data = await get_notices()
    elif collection == "settings":
        data = await get_settings()
    elif collection == "marquee":
        data = await get_marquee()
    elif collection == "profile":
        data = UserProfile(**user.model_dump(by_alias=True))
    else:
        raise ValueError(f"Unknown collection {collection}")
    return {"type": "snapshot", "collection": collection, "data": jsonable_encoder(data, by_alias=True)}


async def publish(collection: str, user_ids: Optional[List[str]] = None):
    """Push a fresh snapshot to every connected user, or only to user_ids."""
    targets = list(manager.online_users) if user_ids is None else [u for u in user_ids if u in manager.online_users]
    for user_id in targets:
        user = await get_user(user_id)
        if user is None:
            continue
        await manager.send_to_user(user_id, await build_snapshot(collection, user))


async def publish_to_admins(collection: str):
    admins = []
    for user_id in list(manager.online_users):
        user = await get_user(user_id)
        if user is not None and user.role == Role.admin:
            admins.append(user_id)
    await publish(collection, admins)

