import logging
from typing import Optional

from pymongo import ReturnDocument

from models.user import UserInDB
from services.database import get_db

logger = logging.getLogger(__name__)


async def get_user(user_id: str) -> Optional[UserInDB]:
    user = await get_db().users.find_one({"_id": user_id})
    if user:
        return UserInDB(**user)


async def get_user_by_email(email: str) -> Optional[UserInDB]:
    user = await get_db().users.find_one({"email": email.lower()})
    if user:
        return UserInDB(**user)


async def create_profile(user: UserInDB) -> UserInDB:
    await get_db().users.insert_one(user.model_dump(by_alias=True, mode="json"))
    logger.info("Created profile %s (%s)", user.id, user.email)
    return user


async def update_profile(user_id: str, fields: dict) -> Optional[UserInDB]:
    user = await get_db().users.find_one_and_update(
        {"_id": user_id},
        {"$set": fields},
        return_document=ReturnDocument.AFTER,
    )
    if user:
        return UserInDB(**user)


async def debit_balance(user_id: str, amount: int) -> Optional[UserInDB]:
    """Takes amount off the balance only if it is covered. Returns None otherwise."""
    user = await get_db().users.find_one_and_update(
        {"_id": user_id, "balance": {"$gte": amount}},
        {"$inc": {"balance": -amount}},
        return_document=ReturnDocument.AFTER,
    )
    if user:
        return UserInDB(**user)


async def credit_balance(user_id: str, amount: int) -> Optional[UserInDB]:
    user = await get_db().users.find_one_and_update(
        {"_id": user_id},
        {"$inc": {"balance": amount}},
        return_document=ReturnDocument.AFTER,
    )
    if user:
        return UserInDB(**user)


async def get_all_users():
    users = await get_db().users.find().to_list(length=None)
    return [UserInDB(**user) for user in users]
