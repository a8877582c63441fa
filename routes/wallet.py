from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from fastapi.encoders import jsonable_encoder
from models.user import UserInDB
from models.wallet import AdminSettings, DepositRequest, WalletView, WithdrawRequest
from services.auth import get_current_user
from services.wallet import get_settings, get_user_transactions, request_deposit, request_withdraw
from services.websocket import publish, publish_to_admins

router = APIRouter()


@router.get("/wallet", response_model=WalletView)
async def read_wallet(user: UserInDB = Depends(get_current_user)):
    return WalletView(
        balance=user.balance,
        settings=await get_settings(),
        transactions=await get_user_transactions(user.id),
    )


@router.get("/settings", response_model=AdminSettings)
async def read_settings():
    return await get_settings()


@router.post("/wallet/deposit")
async def deposit(request: DepositRequest, user: UserInDB = Depends(get_current_user)):
    transaction = await request_deposit(user, request)
    await publish("transactions", [user.id])
    await publish_to_admins("transactions")
    return JSONResponse(status_code=200, content={"transaction": jsonable_encoder(transaction, by_alias=True)})


@router.post("/wallet/withdraw")
async def withdraw(request: WithdrawRequest, user: UserInDB = Depends(get_current_user)):
    transaction = await request_withdraw(user, request)
    await publish("transactions", [user.id])
    await publish("profile", [user.id])
    await publish_to_admins("transactions")
    return JSONResponse(status_code=200, content={"transaction": jsonable_encoder(transaction, by_alias=True)})
