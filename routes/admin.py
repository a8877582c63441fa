from typing import List

from fastapi import APIRouter, Depends
from fastapi.encoders import jsonable_encoder
from models.content import MarqueeRequest, Notice, NoticeCreate, ReplyRequest, SupportMessage
from models.tournament import CreateTournamentRequest, Tournament, TournamentResultsRequest, UpdateTournamentRequest
from models.user import UserProfile
from models.wallet import AdminSettings, BalanceAdjustmentRequest, Transaction, TransactionStatusRequest
from services.auth import require_admin
from services.support import create_notice, delete_notice, get_all_messages, reply_to_message, set_marquee
from services.tournament import create_new_tournament, delete_tournament, get_all_tournaments, record_results, \
    update_tournament
from services.user import get_all_users
from services.wallet import adjust_balance, get_all_transactions, set_transaction_status, update_settings
from services.websocket import publish, publish_to_admins

router = APIRouter(prefix="/admin", dependencies=[Depends(require_admin)])


def dump(model):
    return jsonable_encoder(model, by_alias=True)


@router.get("/tournaments")
async def list_tournaments():
    return [dump(tournament) for tournament in await get_all_tournaments()]


@router.post("/tournaments")
async def create_tournament_endpoint(request: CreateTournamentRequest):
    tournament = await create_new_tournament(request)
    await publish("tournaments")
    return {"tournament": dump(tournament)}


@router.patch("/tournaments/{tournament_id}")
async def update_tournament_endpoint(tournament_id: str, request: UpdateTournamentRequest):
    tournament = await update_tournament(tournament_id, request)
    await publish("tournaments")
    return {"tournament": dump(tournament)}


@router.put("/tournaments/{tournament_id}/results")
async def results_endpoint(tournament_id: str, request: TournamentResultsRequest):
    tournament = await record_results(tournament_id, request)
    await publish("tournaments")
    return {"tournament": dump(tournament)}


@router.delete("/tournaments/{tournament_id}")
async def delete_tournament_endpoint(tournament_id: str):
    await delete_tournament(tournament_id)
    await publish("tournaments")
    return {"message": "Tournament deleted"}


@router.get("/users", response_model=List[UserProfile])
async def list_users():
    return [UserProfile(**user.model_dump(by_alias=True)) for user in await get_all_users()]


@router.post("/users/{user_id}/balance", response_model=UserProfile)
async def adjust_balance_endpoint(user_id: str, request: BalanceAdjustmentRequest):
    user = await adjust_balance(user_id, request)
    await publish("profile", [user_id])
    await publish("transactions", [user_id])
    await publish_to_admins("transactions")
    return UserProfile(**user.model_dump(by_alias=True))


@router.get("/transactions", response_model=List[Transaction])
async def list_transactions():
    return await get_all_transactions()


@router.patch("/transactions/{transaction_id}", response_model=Transaction)
async def transaction_status_endpoint(transaction_id: str, request: TransactionStatusRequest):
    transaction = await set_transaction_status(transaction_id, request.status)
    await publish("transactions", [transaction.user_id])
    await publish_to_admins("transactions")
    return transaction


@router.get("/messages", response_model=List[SupportMessage])
async def list_messages():
    return await get_all_messages()


@router.post("/messages/{message_id}/reply", response_model=SupportMessage)
async def reply_endpoint(message_id: str, request: ReplyRequest):
    message = await reply_to_message(message_id, request.reply)
    await publish("messages", [message.user_id])
    await publish_to_admins("messages")
    return message


@router.post("/notices", response_model=Notice)
async def create_notice_endpoint(request: NoticeCreate):
    notice = await create_notice(request.text)
    await publish("notices")
    return notice


@router.delete("/notices/{notice_id}")
async def delete_notice_endpoint(notice_id: str):
    await delete_notice(notice_id)
    await publish("notices")
    return {"message": "Notice deleted"}


@router.put("/settings", response_model=AdminSettings)
async def settings_endpoint(request: AdminSettings):
    settings = await update_settings(request)
    await publish("settings")
    return settings


@router.put("/marquee")
async def marquee_endpoint(request: MarqueeRequest):
    text = await set_marquee(request.text)
    await publish("marquee")
    return {"text": text}
