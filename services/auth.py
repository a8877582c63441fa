import logging
from datetime import timedelta, datetime, timezone
from typing import Optional

from core.config import SECRET_KEY, ALGORITHM, HANDLE_EMAIL_DOMAIN, ADMIN_EMAILS, GOOGLE_CLIENT_ID
from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from google.auth.transport.requests import Request
from google.oauth2 import id_token
from jose import jwt
from passlib.context import CryptContext

from models.user import Role, UserInDB
from .user import get_user, get_user_by_email

logger = logging.getLogger(__name__)

# Password hashing
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

# OAuth2 setup
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="token")


def normalize_handle(handle: str) -> str:
    handle = handle.strip()
    if "@" in handle:
        return handle.lower()
    return f"{handle}@{HANDLE_EMAIL_DOMAIN}".lower()


def role_for_email(email: str) -> Role:
    return Role.admin if email.lower() in ADMIN_EMAILS else Role.user


def verify_password(plain_password, hashed_password):
    return pwd_context.verify(plain_password, hashed_password)


def get_password_hash(password):
    return pwd_context.hash(password)


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None):
    to_encode = data.copy()
    if expires_delta:
        expire = datetime.now(timezone.utc) + expires_delta
    else:
        expire = datetime.now(timezone.utc) + timedelta(minutes=15)
    to_encode.update({"exp": expire})
    encoded_jwt = jwt.encode(to_encode, SECRET_KEY, algorithm=ALGORITHM)
    return encoded_jwt


def decode_subject(token: str) -> Optional[str]:
    try:
        payload = jwt.decode(token, SECRET_KEY, algorithms=[ALGORITHM])
    except jwt.JWTError:
        return None
    return payload.get("sub")


async def get_user_from_token(token: str):
    user_id = decode_subject(token)
    if user_id is None:
        return None
    return await get_user(user_id)


async def authenticate_user(handle: str, password: str):
    user = await get_user_by_email(normalize_handle(handle))
    if not user or not user.password or not verify_password(password, user.password):
        return False
    return user


def verify_google_token(token: str) -> dict:
    """Returns the verified claims; raises ValueError on a bad token."""
    return id_token.verify_oauth2_token(token, Request(), GOOGLE_CLIENT_ID)


async def get_current_user(token: str = Depends(oauth2_scheme)) -> UserInDB:
    user = await get_user_from_token(token)
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Could not validate credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return user


async def require_admin(user: UserInDB = Depends(get_current_user)) -> UserInDB:
    # Role comes from the stored profile, not from the token claim
    if user.role != Role.admin:
        logger.warning("User %s tried to reach an admin route", user.id)
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Admin access required")
    return user
