from fastapi import APIRouter, HTTPException, Depends
from models.user import UpdateProfileRequest, UserInDB, UserProfile
from services.auth import get_current_user
from services.user import update_profile
from services.views import navigation
from services.websocket import publish

router = APIRouter()


@router.get("/users/me", response_model=UserProfile)
async def read_users_me(user: UserInDB = Depends(get_current_user)):
    return UserProfile(**user.model_dump(by_alias=True))


@router.patch("/users/me", response_model=UserProfile)
async def update_users_me(request: UpdateProfileRequest, user: UserInDB = Depends(get_current_user)):
    changes = {key: value.strip() for key, value in request.model_dump(exclude_none=True).items()}
    if not changes or not all(changes.values()):
        raise HTTPException(status_code=400, detail="Name and game ID cannot be empty")
    updated = await update_profile(user.id, changes)
    await publish("profile", [user.id])
    return UserProfile(**updated.model_dump(by_alias=True))


@router.get("/users/me/navigation")
async def read_navigation(user: UserInDB = Depends(get_current_user)):
    return navigation(user)
