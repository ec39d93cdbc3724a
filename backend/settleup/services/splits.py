"""
Split calculation: turn a total and a splitting policy into per-participant shares.

Three kinds are supported and dispatched through a fixed table:
    - equal: everyone owes total / N, rounded to cents
    - exact: the caller gives one amount per participant
    - percentage: the caller gives one percentage per participant

The shares of a computed split always add up to the (cent-rounded) total
exactly. Percentage shares are rounded half-up to cents except the last one,
which takes whatever is left. Equal shares go through money.allocate: the
leftover cents land on the trailing shares, one cent each, so no two equal
shares ever differ by more than a cent, even when N is large enough that a
single last share would have to absorb several cents. Exact amounts are
taken as given once they pass validation.

Every check happens before a SplitResult exists, so an invalid request can
never reach the ledger.
"""
import logging
from decimal import Decimal
from typing import Iterable, Mapping, Optional, Sequence, Union

from settleup.exceptions import InvalidAmountError, InvalidSplitError
from settleup.models import ParticipantId, Share, SplitKind, SplitResult
from settleup.money import CENT, ZERO, allocate, round2, to_money

logger = logging.getLogger(__name__)

HUNDRED = Decimal("100")
SUM_TOLERANCE = CENT
PERCENTAGE_TOLERANCE = CENT

SplitInputs = Optional[Union[Sequence, Mapping]]


def _as_kind(kind) -> SplitKind:
    try:
        return SplitKind(kind)
    except ValueError:
        allowed = ", ".join(k.value for k in SplitKind)
        raise InvalidSplitError(f"Unknown split type {kind!r}. Must be one of: {allowed}") from None


def _money(value, what: str) -> Decimal:
    try:
        return to_money(value)
    except InvalidAmountError as e:
        raise InvalidSplitError(f"Invalid {what}: {e}") from None


def _check_total(total) -> Decimal:
    amount = _money(total, "total")
    if amount <= 0:
        raise InvalidSplitError(f"Total amount must be positive, got {amount}")
    rounded = round2(amount)
    if rounded <= 0:
        raise InvalidSplitError(f"Total amount {amount} is less than one cent")
    return rounded


def _check_participants(participants: Iterable[ParticipantId]) -> list:
    people = list(participants or [])
    if not people:
        raise InvalidSplitError("At least one participant required")
    if len(set(people)) != len(people):
        raise InvalidSplitError("Participants must be unique")
    return people


def _ordered(values: SplitInputs, participants: list, what: str) -> list:
    """Line caller inputs up with the participant order. Accepts a list or a participant->value map."""
    if isinstance(values, Mapping):
        if set(values.keys()) != set(participants):
            raise InvalidSplitError(f"{what.capitalize()} must match participant list")
        return [values[p] for p in participants]
    values = list(values)
    if len(values) != len(participants):
        raise InvalidSplitError(
            f"Number of {what} ({len(values)}) must match number of participants ({len(participants)})"
        )
    return values


def _check_amounts(total: Decimal, shares: Sequence[Share]) -> None:
    for s in shares:
        if s.amount < 0:
            raise InvalidSplitError(f"Invalid split amount for participant {s.participant}: {s.amount}")
    amount_sum = sum((s.amount for s in shares), ZERO)
    discrepancy = amount_sum - total
    if abs(discrepancy) > SUM_TOLERANCE:
        raise InvalidSplitError(
            f"Sum of splits ({amount_sum}) does not equal total amount ({total}); off by {discrepancy}"
        )


def _check_percentages(percentages: Sequence[Decimal]) -> None:
    for pct in percentages:
        if pct < 0 or pct > HUNDRED:
            raise InvalidSplitError(f"Invalid percentage {pct}. Percentage must be between 0 and 100")
    pct_sum = sum(percentages, ZERO)
    if abs(pct_sum - HUNDRED) > PERCENTAGE_TOLERANCE:
        raise InvalidSplitError(f"Sum of percentages ({pct_sum}%) does not equal 100%")


def _equal_shares(total: Decimal, participants: list, amounts: SplitInputs, percentages: SplitInputs) -> list[Share]:
    if amounts is not None or percentages is not None:
        raise InvalidSplitError("Equal split takes no amounts or percentages")
    raw = total / len(participants)
    allocated = allocate(total, [raw] * len(participants))
    return [Share(p, amount) for p, amount in zip(participants, allocated)]


def _exact_shares(total: Decimal, participants: list, amounts: SplitInputs, percentages: SplitInputs) -> list[Share]:
    if percentages is not None:
        raise InvalidSplitError("Exact split takes amounts, not percentages")
    if amounts is None:
        raise InvalidSplitError("Exact split requires one amount per participant")
    values = [_money(a, "amount") for a in _ordered(amounts, participants, "amounts")]
    shares = [Share(p, amount) for p, amount in zip(participants, values)]
    _check_amounts(total, shares)
    return shares


def _percentage_shares(
    total: Decimal, participants: list, amounts: SplitInputs, percentages: SplitInputs
) -> list[Share]:
    if amounts is not None:
        raise InvalidSplitError("Percentage split takes percentages, not amounts")
    if percentages is None:
        pcts = [HUNDRED / len(participants)] * len(participants)
    else:
        pcts = [_money(p, "percentage") for p in _ordered(percentages, participants, "percentages")]
    _check_percentages(pcts)
    allocated = [round2(total * pct / HUNDRED) for pct in pcts[:-1]]
    allocated.append(total - sum(allocated, ZERO))
    if allocated[-1] < 0:
        raise InvalidSplitError("Percentages leave a negative share for the last participant")
    return [Share(p, amount, pct) for p, amount, pct in zip(participants, allocated, pcts)]


_CREATORS = {
    SplitKind.EQUAL: _equal_shares,
    SplitKind.EXACT: _exact_shares,
    SplitKind.PERCENTAGE: _percentage_shares,
}


def compute_split(
    kind: Union[SplitKind, str],
    total,
    participants: Iterable[ParticipantId],
    amounts: SplitInputs = None,
    percentages: SplitInputs = None,
) -> SplitResult:
    """
    Compute the shares of total among participants.

    amounts (exact) and percentages (percentage) are given either in
    participant order or as a participant -> value mapping. Percentages
    default to an equal split of 100% when omitted.
    Raises InvalidSplitError on any invalid input.
    """
    kind = _as_kind(kind)
    total = _check_total(total)
    people = _check_participants(participants)
    shares = _CREATORS[kind](total, people, amounts, percentages)
    logger.debug("Computed %s split of %s over %d participants", kind.value, total, len(shares))
    return SplitResult(kind=kind, total=total, shares=tuple(shares))


def validate_split(kind: Union[SplitKind, str], total, shares: Iterable[Share]) -> None:
    """Check an already built share list against total. Raises InvalidSplitError."""
    kind = _as_kind(kind)
    total = _check_total(total)
    shares = list(shares or [])
    if not shares:
        raise InvalidSplitError("Splits list cannot be empty")
    _check_participants(s.participant for s in shares)
    amounts = [Share(s.participant, _money(s.amount, "amount")) for s in shares]
    if kind is SplitKind.PERCENTAGE:
        missing = [s.participant for s in shares if s.percentage is None]
        if missing:
            raise InvalidSplitError(f"Percentage split shares need a percentage (missing for {missing})")
        _check_percentages([_money(s.percentage, "percentage") for s in shares])
    _check_amounts(total, amounts)
