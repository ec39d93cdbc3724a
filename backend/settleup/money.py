"""Money helpers: conversion to Decimal, cent rounding and remainder allocation."""
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP

from settleup.exceptions import InvalidAmountError

CENT = Decimal("0.01")
# Balances smaller than this are treated as settled.
SETTLEMENT_EPSILON = CENT
ZERO = Decimal("0")


def to_money(value) -> Decimal:
    """
    Convert an int, float, str or Decimal to Decimal.
    Floats go through str() so 0.1 stays 0.1 instead of its binary expansion.
    """
    if isinstance(value, bool):
        raise InvalidAmountError(f"Not a money value: {value!r}")
    if isinstance(value, Decimal):
        amount = value
    elif isinstance(value, (int, float, str)):
        try:
            amount = Decimal(str(value).strip())
        except InvalidOperation:
            raise InvalidAmountError(f"Not a money value: {value!r}") from None
    else:
        raise InvalidAmountError(f"Not a money value: {value!r}")
    if not amount.is_finite():
        raise InvalidAmountError(f"Money value must be finite, got {value!r}")
    return amount


def round2(value: Decimal) -> Decimal:
    """Round to the nearest cent, half-up."""
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


def is_settled(value: Decimal) -> bool:
    return abs(value) < SETTLEMENT_EPSILON


def allocate(total: Decimal, raw_amounts: list[Decimal]) -> list[Decimal]:
    """
    Round each raw amount to cents so that the result sums to total exactly.

    The rounding remainder (a whole number of cents) is absorbed one cent at a
    time by the shares that rounding moved furthest the other way; ties go to
    the later position. For equal raw amounts this puts the remainder on the
    trailing shares. raw_amounts must add up to total, so the remainder is
    never more than one cent per share.
    """
    if not raw_amounts:
        return []
    total = round2(total)
    rounded = [round2(raw) for raw in raw_amounts]
    remainder = total - sum(rounded, ZERO)
    cents = int(remainder / CENT)
    if cents == 0:
        return rounded
    if abs(cents) > len(rounded):
        raise ValueError(f"Amounts do not add up to {total}: {remainder} left after rounding")

    step = CENT if cents > 0 else -CENT
    if cents > 0:
        drift = [raw - r for raw, r in zip(raw_amounts, rounded)]
    else:
        drift = [r - raw for raw, r in zip(raw_amounts, rounded)]
    order = sorted(range(len(rounded)), key=lambda i: (drift[i], i), reverse=True)
    for i in order[:abs(cents)]:
        rounded[i] += step
    return rounded
