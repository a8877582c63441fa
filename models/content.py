from enum import Enum
from pydantic import BaseModel, Field
from services.database import default_id
from services.rules import now_ms
from typing import Optional


class MessageStatus(str, Enum):
    pending = "Pending"
    replied = "Replied"


class SupportMessage(BaseModel):
    id: str = Field(default_factory=default_id, alias="_id")
    user_id: str
    user_name: str
    message: str
    reply: Optional[str] = None
    status: MessageStatus = MessageStatus.pending
    date: int = Field(default_factory=now_ms)


class SupportMessageCreate(BaseModel):
    message: str


class ReplyRequest(BaseModel):
    reply: str


class Notice(BaseModel):
    id: str = Field(default_factory=default_id, alias="_id")
    text: str
    date: int = Field(default_factory=now_ms)


class NoticeCreate(BaseModel):
    text: str


class MarqueeRequest(BaseModel):
    text: str
