"""Balances: what one user owes or is owed, overall and per counterpart."""
from fastapi import APIRouter, Depends

from settleup.schemas import BalanceItem, BalanceSummaryResponse, PairBalance
from settleup.services.ledger_service import LedgerService
from settleup.state import get_ledger_service

router = APIRouter(prefix="/balances", tags=["balances"])


@router.get("/{user_id}", response_model=BalanceSummaryResponse)
def get_balance_summary(
    user_id: int,
    service: LedgerService = Depends(get_ledger_service),
):
    summary = service.balance_summary(user_id)
    return BalanceSummaryResponse(
        user_id=user_id,
        balances=[
            BalanceItem(user_id=other, amount=float(amount))
            for other, amount in sorted(summary.balances.items())
        ],
        total_owed=float(summary.total_owed),
        total_owed_to=float(summary.total_owed_to),
        net_balance=float(summary.net_balance),
    )


@router.get("/{user_id}/{other_user_id}", response_model=PairBalance)
def get_balance_between(
    user_id: int,
    other_user_id: int,
    service: LedgerService = Depends(get_ledger_service),
):
    # Positive: other_user_id owes user_id. No open balance reads as zero.
    amount = service.balance_between(user_id, other_user_id)
    return PairBalance(user_id=user_id, other_user_id=other_user_id, amount=float(amount))
