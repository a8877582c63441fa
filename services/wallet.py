import logging
from typing import List

from fastapi import HTTPException
from pymongo import ReturnDocument

from core.config import DEFAULT_BKASH_NUMBER, DEFAULT_NAGAD_NUMBER, MIN_DEPOSIT, MIN_WITHDRAW
from models.user import UserInDB
from models.wallet import (AdminSettings, BalanceAdjustmentRequest, DepositRequest, Transaction,
                           TransactionKind, TransactionStatus, WithdrawRequest)
from services.database import SETTINGS_ID, get_db
from services.user import credit_balance, debit_balance, get_user

logger = logging.getLogger(__name__)


async def get_settings() -> AdminSettings:
    settings = await get_db().settings.find_one({"_id": SETTINGS_ID})
    if settings:
        return AdminSettings(**settings)
    return AdminSettings(bkash_number=DEFAULT_BKASH_NUMBER, nagad_number=DEFAULT_NAGAD_NUMBER)


async def update_settings(settings: AdminSettings) -> AdminSettings:
    await get_db().settings.update_one({"_id": SETTINGS_ID}, {"$set": settings.model_dump()}, upsert=True)
    logger.info("Receiving numbers updated")
    return settings


async def insert_transaction(transaction: Transaction) -> Transaction:
    await get_db().transactions.insert_one(transaction.model_dump(by_alias=True, mode="json"))
    return transaction


async def get_user_transactions(user_id: str) -> List[Transaction]:
    transactions = await get_db().transactions.find({"user_id": user_id}).sort("date", -1).to_list(length=None)
    return [Transaction(**transaction) for transaction in transactions]


async def get_all_transactions() -> List[Transaction]:
    transactions = await get_db().transactions.find().sort("date", -1).to_list(length=None)
    return [Transaction(**transaction) for transaction in transactions]


async def request_deposit(user: UserInDB, request: DepositRequest) -> Transaction:
    if request.amount < MIN_DEPOSIT:
        raise HTTPException(status_code=400, detail=f"Minimum deposit is {MIN_DEPOSIT}")
    if not request.sender_number.strip() or not request.transaction_ref.strip():
        raise HTTPException(status_code=400, detail="Fill in every field")

    # Balance is only credited later by an admin, never here
    transaction = Transaction(
        user_id=user.id,
        kind=TransactionKind.deposit,
        amount=request.amount,
        method=request.method,
        sender_number=request.sender_number.strip(),
        transaction_ref=request.transaction_ref.strip(),
        status=TransactionStatus.pending,
    )
    await insert_transaction(transaction)
    logger.info("Deposit request %s by %s for %s", transaction.id, user.id, request.amount)
    return transaction


async def request_withdraw(user: UserInDB, request: WithdrawRequest) -> Transaction:
    if request.amount < MIN_WITHDRAW:
        raise HTTPException(status_code=400, detail=f"Minimum withdrawal is {MIN_WITHDRAW}")
    if request.amount > user.balance:
        raise HTTPException(status_code=400, detail="Insufficient balance")
    if not request.number.strip():
        raise HTTPException(status_code=400, detail="Enter a valid number")

    if await debit_balance(user.id, request.amount) is None:
        logger.warning("Withdraw by %s refused: balance below %s", user.id, request.amount)
        raise HTTPException(status_code=400, detail="Insufficient balance")

    transaction = Transaction(
        user_id=user.id,
        kind=TransactionKind.withdraw,
        amount=request.amount,
        method=request.method,
        number=request.number.strip(),
        status=TransactionStatus.pending,
    )
    await insert_transaction(transaction)
    logger.info("Withdraw request %s by %s for %s", transaction.id, user.id, request.amount)
    return transaction


async def set_transaction_status(transaction_id: str, status: TransactionStatus) -> Transaction:
    # Status only. Crediting a deposit is a separate balance adjustment.
    transaction = await get_db().transactions.find_one_and_update(
        {"_id": transaction_id},
        {"$set": {"status": status.value}},
        return_document=ReturnDocument.AFTER,
    )
    if not transaction:
        raise HTTPException(status_code=404, detail="Transaction not found")
    logger.info("Transaction %s marked %s", transaction_id, status.value)
    return Transaction(**transaction)


async def adjust_balance(user_id: str, request: BalanceAdjustmentRequest) -> UserInDB:
    if request.kind not in (TransactionKind.manual, TransactionKind.reward):
        raise HTTPException(status_code=400, detail="Adjustments must be Manual or Reward")
    if request.amount == 0:
        raise HTTPException(status_code=400, detail="Amount must not be zero")
    if await get_user(user_id) is None:
        raise HTTPException(status_code=404, detail="User not found")

    if request.amount > 0:
        user = await credit_balance(user_id, request.amount)
    else:
        user = await debit_balance(user_id, -request.amount)
        if user is None:
            raise HTTPException(status_code=400, detail="Balance cannot go negative")

    await insert_transaction(Transaction(
        user_id=user_id,
        kind=request.kind,
        amount=request.amount,
        note=request.note,
        status=TransactionStatus.completed,
    ))
    logger.info("Balance of %s adjusted by %s (%s)", user_id, request.amount, request.kind.value)
    return user
