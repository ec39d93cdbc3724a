"""Expenses: apply a new expense's split to the ledger, or take a deleted one back out."""
from fastapi import APIRouter, Depends, HTTPException

from settleup.models import Share, SplitKind, SplitResult
from settleup.money import to_money
from settleup.routers.splits import compute_from_request, share_items
from settleup.schemas import ExpenseCreate, ExpenseResponse, ExpenseReverse
from settleup.services.ledger_service import LedgerService
from settleup.state import get_ledger_service

router = APIRouter(prefix="/expenses", tags=["expenses"])


def _expense_response(payer_id: int, split: SplitResult) -> ExpenseResponse:
    return ExpenseResponse(
        payer_id=payer_id,
        split_type=split.kind.value,
        amount=float(split.total),
        shares=share_items(split),
    )


@router.post("", response_model=ExpenseResponse)
def create_expense(
    data: ExpenseCreate,
    service: LedgerService = Depends(get_ledger_service),
):
    split = compute_from_request(service, data)
    service.apply_expense(data.payer_id, split)
    return _expense_response(data.payer_id, split)


@router.post("/reverse", status_code=204)
def reverse_expense(
    data: ExpenseReverse,
    service: LedgerService = Depends(get_ledger_service),
):
    # Every caller-facing error here (unknown split type, bad amounts, failed validation) is a ValueError.
    try:
        split = SplitResult(
            kind=SplitKind(data.split_type),
            total=to_money(data.amount),
            shares=tuple(
                Share(
                    participant=s.participant_id,
                    amount=to_money(s.amount),
                    percentage=to_money(s.percentage) if s.percentage is not None else None,
                )
                for s in data.shares
            ),
        )
        service.reverse_expense(data.payer_id, split)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
