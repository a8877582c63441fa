from enum import Enum
from pydantic import BaseModel, Field
from services.database import default_id
from services.rules import now_ms
from typing import List, Optional


class TransactionKind(str, Enum):
    deposit = "Deposit"
    withdraw = "Withdraw"
    reward = "Reward"
    manual = "Manual"


class TransactionStatus(str, Enum):
    pending = "Pending"
    completed = "Completed"
    rejected = "Rejected"


class PaymentMethod(str, Enum):
    bkash = "bKash"
    nagad = "Nagad"


class Transaction(BaseModel):
    id: str = Field(default_factory=default_id, alias="_id")
    user_id: str
    kind: TransactionKind
    amount: int
    method: Optional[PaymentMethod] = None
    number: Optional[str] = None
    sender_number: Optional[str] = None
    transaction_ref: Optional[str] = None
    note: Optional[str] = None
    status: TransactionStatus = TransactionStatus.pending
    date: int = Field(default_factory=now_ms)


class DepositRequest(BaseModel):
    amount: int
    method: PaymentMethod = PaymentMethod.bkash
    sender_number: str = ""
    transaction_ref: str = ""


class WithdrawRequest(BaseModel):
    amount: int
    method: PaymentMethod = PaymentMethod.bkash
    number: str = ""


class TransactionStatusRequest(BaseModel):
    status: TransactionStatus


class BalanceAdjustmentRequest(BaseModel):
    amount: int
    kind: TransactionKind = TransactionKind.manual
    note: Optional[str] = None


class AdminSettings(BaseModel):
    bkash_number: str
    nagad_number: str


class WalletView(BaseModel):
    balance: int
    settings: AdminSettings
    transactions: List[Transaction]
