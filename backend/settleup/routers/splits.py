"""Splits: compute per-participant shares without touching the ledger."""
from fastapi import APIRouter, Depends, HTTPException

from settleup.exceptions import InvalidSplitError
from settleup.models import SplitResult
from settleup.schemas import ShareItem, SplitRequest, SplitResponse
from settleup.services.ledger_service import LedgerService
from settleup.state import get_ledger_service

router = APIRouter(prefix="/splits", tags=["splits"])


def share_items(split: SplitResult) -> list[ShareItem]:
    return [
        ShareItem(
            participant_id=s.participant,
            amount=float(s.amount),
            percentage=float(s.percentage) if s.percentage is not None else None,
        )
        for s in split
    ]


def compute_from_request(service: LedgerService, data: SplitRequest) -> SplitResult:
    try:
        return service.compute_split(
            data.split_type,
            data.amount,
            data.participant_ids,
            amounts=data.shares,
            percentages=data.percentages,
        )
    except InvalidSplitError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.post("", response_model=SplitResponse)
def create_split(
    data: SplitRequest,
    service: LedgerService = Depends(get_ledger_service),
):
    split = compute_from_request(service, data)
    return SplitResponse(split_type=split.kind.value, amount=float(split.total), shares=share_items(split))
