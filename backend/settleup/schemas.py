"""Pydantic schemas for request/response."""
from datetime import datetime
from typing import Optional

from pydantic import BaseModel


# ----- Split -----
class ShareItem(BaseModel):
    participant_id: int
    amount: float
    percentage: Optional[float] = None


class SplitRequest(BaseModel):
    amount: float
    participant_ids: list[int]
    split_type: str = "equal"
    # exact: participant_id -> amount; percentage: participant_id -> percent
    shares: Optional[dict[int, float]] = None
    percentages: Optional[dict[int, float]] = None


class SplitResponse(BaseModel):
    split_type: str
    amount: float
    shares: list[ShareItem]


# ----- Expense -----
class ExpenseCreate(SplitRequest):
    payer_id: int


class ExpenseResponse(SplitResponse):
    payer_id: int


class ExpenseReverse(BaseModel):
    payer_id: int
    split_type: str = "equal"
    amount: float
    shares: list[ShareItem]


# ----- Payment (settle up) -----
class PaymentCreate(BaseModel):
    from_user_id: int
    to_user_id: int
    amount: float


class TransactionResponse(BaseModel):
    id: str
    from_user_id: int
    to_user_id: int
    amount: float
    type: str
    created_at: Optional[datetime] = None


# ----- Settlement -----
class SettlementItem(BaseModel):
    from_user_id: int
    to_user_id: int
    amount: float


# ----- Balances -----
class BalanceItem(BaseModel):
    user_id: int
    amount: float


class PairBalance(BaseModel):
    user_id: int
    other_user_id: int
    amount: float


class BalanceSummaryResponse(BaseModel):
    user_id: int
    balances: list[BalanceItem]
    total_owed: float
    total_owed_to: float
    net_balance: float
