from enum import Enum
from pydantic import BaseModel, Field
from services.database import default_id
from typing import Optional


class Role(str, Enum):
    user = "user"
    admin = "admin"


class UserInDB(BaseModel):
    id: str = Field(default_factory=default_id, alias="_id")
    email: str
    name: str
    game_id: str
    password: Optional[str] = None
    balance: int = 0
    role: Role = Role.user


class UserProfile(BaseModel):
    id: str = Field(alias="_id")
    email: str
    name: str
    game_id: str
    balance: int = 0
    role: Role = Role.user


class UserCreate(BaseModel):
    handle: str
    password: str
    name: str
    game_id: str


class UpdateProfileRequest(BaseModel):
    name: Optional[str] = None
    game_id: Optional[str] = None


class LoginRequest(BaseModel):
    handle: str
    password: str


class GoogleLoginRequest(BaseModel):
    accessToken: str
