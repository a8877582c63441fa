import logging
from typing import List

from fastapi import HTTPException
from pymongo import ReturnDocument

from core.config import DEFAULT_MARQUEE
from models.content import MessageStatus, Notice, SupportMessage
from models.user import UserInDB
from services.database import MARQUEE_ID, get_db

logger = logging.getLogger(__name__)


async def send_message(user: UserInDB, text: str) -> SupportMessage:
    if not text.strip():
        raise HTTPException(status_code=400, detail="Message cannot be empty")
    message = SupportMessage(user_id=user.id, user_name=user.name, message=text.strip())
    await get_db().messages.insert_one(message.model_dump(by_alias=True, mode="json"))
    logger.info("Support message %s from %s", message.id, user.id)
    return message


async def get_user_messages(user_id: str) -> List[SupportMessage]:
    messages = await get_db().messages.find({"user_id": user_id}).sort("date", -1).to_list(length=None)
    return [SupportMessage(**message) for message in messages]


async def get_all_messages() -> List[SupportMessage]:
    messages = await get_db().messages.find().sort("date", -1).to_list(length=None)
    return [SupportMessage(**message) for message in messages]


async def reply_to_message(message_id: str, reply: str) -> SupportMessage:
    if not reply.strip():
        raise HTTPException(status_code=400, detail="Reply cannot be empty")
    message = await get_db().messages.find_one_and_update(
        {"_id": message_id},
        {"$set": {"reply": reply.strip(), "status": MessageStatus.replied.value}},
        return_document=ReturnDocument.AFTER,
    )
    if not message:
        raise HTTPException(status_code=404, detail="Message not found")
    return SupportMessage(**message)


async def get_notices() -> List[Notice]:
    notices = await get_db().notices.find().sort("date", -1).to_list(length=None)
    return [Notice(**notice) for notice in notices]


async def create_notice(text: str) -> Notice:
    if not text.strip():
        raise HTTPException(status_code=400, detail="Notice cannot be empty")
    notice = Notice(text=text.strip())
    await get_db().notices.insert_one(notice.model_dump(by_alias=True))
    logger.info("Notice %s published", notice.id)
    return notice


async def delete_notice(notice_id: str):
    result = await get_db().notices.delete_one({"_id": notice_id})
    if result.deleted_count == 0:
        raise HTTPException(status_code=404, detail="Notice not found")


async def get_marquee() -> str:
    marquee = await get_db().settings.find_one({"_id": MARQUEE_ID})
    if marquee and marquee.get("text"):
        return marquee["text"]
    return DEFAULT_MARQUEE


async def set_marquee(text: str) -> str:
    await get_db().settings.update_one({"_id": MARQUEE_ID}, {"$set": {"text": text}}, upsert=True)
    return text
