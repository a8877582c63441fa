from typing import List

from fastapi import APIRouter, Depends
from models.content import Notice, SupportMessage, SupportMessageCreate
from models.user import UserInDB
from services.auth import get_current_user
from services.support import get_marquee, get_notices, get_user_messages, send_message
from services.websocket import publish, publish_to_admins

router = APIRouter()


@router.post("/support/messages", response_model=SupportMessage)
async def create_message(request: SupportMessageCreate, user: UserInDB = Depends(get_current_user)):
    message = await send_message(user, request.message)
    await publish("messages", [user.id])
    await publish_to_admins("messages")
    return message


@router.get("/support/messages", response_model=List[SupportMessage])
async def read_messages(user: UserInDB = Depends(get_current_user)):
    return await get_user_messages(user.id)


@router.get("/notices", response_model=List[Notice])
async def read_notices():
    return await get_notices()


@router.get("/marquee")
async def read_marquee():
    return {"text": await get_marquee()}
