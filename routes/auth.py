import logging
from datetime import timedelta

from core.config import ACCESS_TOKEN_EXPIRE_MINUTES, MIN_PASSWORD_LENGTH
from fastapi import APIRouter, Depends, HTTPException, status
from models.user import GoogleLoginRequest, LoginRequest, UserCreate, UserInDB, UserProfile
from pymongo.errors import DuplicateKeyError
from services.auth import get_password_hash, authenticate_user, create_access_token, get_current_user, \
    normalize_handle, role_for_email, verify_google_token
from services.user import create_profile, get_user_by_email
from services.websocket import manager

logger = logging.getLogger(__name__)

router = APIRouter()


def issue_token(user: UserInDB):
    access_token_expires = timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES)
    access_token = create_access_token(
        data={"sub": user.id, "role": user.role.value}, expires_delta=access_token_expires
    )
    return {
        "access_token": access_token,
        "token_type": "bearer",
        "user": UserProfile(**user.model_dump(by_alias=True)).model_dump(by_alias=True, mode="json"),
    }


@router.post("/google-login")
async def google_login(request: GoogleLoginRequest):
    try:
        id_token_str = request.accessToken

        if not id_token_str:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid Google token str")

        # Verify the ID token
        id_info = verify_google_token(id_token_str)
        email = id_info.get("email")
        if not email:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid Google email")

        user = await get_user_by_email(email)
        if not user:
            user = await create_profile(UserInDB(
                email=email.lower(),
                name=id_info.get("name") or "Unnamed",
                game_id="SET_ID",
                password=None,
                role=role_for_email(email),
            ))

        return issue_token(user)

    except ValueError as error:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=f"Invalid Google token {error}")


@router.post("/register")
async def register_user(user: UserCreate):
    if not all(value.strip() for value in (user.handle, user.password, user.name, user.game_id)):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Fill in every field")
    if len(user.password) < MIN_PASSWORD_LENGTH:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Password must be at least {MIN_PASSWORD_LENGTH} characters",
        )

    email = normalize_handle(user.handle)
    profile = UserInDB(
        email=email,
        name=user.name.strip(),
        game_id=user.game_id.strip(),
        password=get_password_hash(user.password),
        balance=0,
        role=role_for_email(email),
    )
    try:
        await create_profile(profile)
    except DuplicateKeyError:
        logger.warning("Registration refused, %s already exists", email)
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="This user ID is already in use.",
        )
    return issue_token(profile)


@router.post("/token")
async def login_for_access_token(login_request: LoginRequest):
    user = await authenticate_user(login_request.handle, login_request.password)
    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Incorrect user ID or password",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return issue_token(user)


@router.post("/logout")
async def logout(user: UserInDB = Depends(get_current_user)):
    await manager.close_user(user.id)
    return {"message": "Logged out"}
