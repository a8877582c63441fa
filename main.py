import contextlib
import logging

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from starlette.websockets import WebSocket, WebSocketDisconnect

from core.config import CORS_ORIGINS, LOG_LEVEL
from middlewares.auth import AuthMiddleware
from routes import routers
from services.database import create_indexes, get_db, initialize_db_connection
from services.user import get_user
from services.auth import decode_subject
from services.websocket import COLLECTIONS, build_snapshot, manager

logging.basicConfig(
    level=getattr(logging, LOG_LEVEL, logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(title="FF Portal")

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],  # This allows all methods, including OPTIONS
    allow_headers=["*"],
)


@contextlib.asynccontextmanager
async def lifespan(app: FastAPI):
    # Tests inject their own store before startup
    if get_db() is None:
        initialize_db_connection()
    await create_indexes()
    logger.info("FF Portal started")
    yield


app.router.lifespan_context = lifespan
app.add_middleware(AuthMiddleware)

# Include the routers
for router in routers:
    app.include_router(router)


@app.get("/health")
async def health():
    return {"status": "ok"}


@app.websocket("/ws")
async def websocket_endpoint(websocket: WebSocket, token: str):
    user_id = decode_subject(token)
    user = await get_user(user_id) if user_id else None
    if user is None:
        await websocket.close(code=1008)
        return
    await manager.connect(websocket, user_id)
    try:
        for collection in COLLECTIONS:
            await manager.send_personal_message(await build_snapshot(collection, user), websocket)
        while True:
            data = await websocket.receive_text()
            await manager.handle_message(data, websocket, user_id)
    except WebSocketDisconnect:
        logger.info("Feed disconnected for %s", user_id)
    finally:
        manager.disconnect(websocket, user_id)


if __name__ == "__main__":
    uvicorn.run("main:app", host="127.0.0.1", port=8000, reload=True)
