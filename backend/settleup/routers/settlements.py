"""Settlements: suggest who should pay whom, record payments and list them."""
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from settleup.exceptions import InvalidAmountError
from settleup.models import SettlementTransaction, Transaction
from settleup.schemas import PaymentCreate, SettlementItem, TransactionResponse
from settleup.services.ledger_service import LedgerService
from settleup.state import get_ledger_service

router = APIRouter(prefix="/settlements", tags=["settlements"])


def _transaction_response(txn: Transaction) -> TransactionResponse:
    return TransactionResponse(
        id=txn.id,
        from_user_id=txn.from_user,
        to_user_id=txn.to_user,
        amount=float(txn.amount),
        type=txn.type.value,
        created_at=txn.created_at,
    )


@router.get("/simplify", response_model=list[SettlementItem])
def get_settlements(
    participant_ids: Optional[list[int]] = Query(None),
    service: LedgerService = Depends(get_ledger_service),
):
    settlements = service.simplify(participant_ids)
    return [
        SettlementItem(from_user_id=s.from_user, to_user_id=s.to_user, amount=float(s.amount))
        for s in settlements
    ]


@router.post("/pay", response_model=TransactionResponse)
def record_payment(
    data: PaymentCreate,
    service: LedgerService = Depends(get_ledger_service),
):
    try:
        txn = service.record_settlement(data.from_user_id, data.to_user_id, data.amount)
    except InvalidAmountError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return _transaction_response(txn)


@router.post("/apply", response_model=list[TransactionResponse])
def apply_settlements(
    items: list[SettlementItem],
    service: LedgerService = Depends(get_ledger_service),
):
    settlements = [SettlementTransaction(i.from_user_id, i.to_user_id, i.amount) for i in items]
    try:
        txns = service.apply_settlements(settlements)
    except InvalidAmountError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return [_transaction_response(t) for t in txns]


@router.get("/transactions", response_model=list[TransactionResponse])
def list_transactions(
    user_id: Optional[int] = Query(None),
    service: LedgerService = Depends(get_ledger_service),
):
    return [_transaction_response(t) for t in service.transactions_for(user_id)]
