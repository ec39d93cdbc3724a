"""Minimize number of transfers so everyone is settled (who owes whom)."""
import heapq
import logging
from typing import Iterable, Optional

from settleup.exceptions import LedgerInvariantViolation
from settleup.models import ParticipantId, SettlementTransaction
from settleup.money import SETTLEMENT_EPSILON, ZERO, round2, to_money
from settleup.services.ledger import BalanceLedger

logger = logging.getLogger(__name__)


def compute_settlements(balances: dict) -> list[SettlementTransaction]:
    """
    balances: participant -> net balance (positive = is owed money, negative = owes money).
    Returns a minimal list of transfers to settle up.

    Greedy: the largest creditor and the largest debtor settle min(credit, debt),
    and whoever has something left goes back in line. Equal amounts are ordered
    by participant id. Remainders are kept unrounded; only emitted amounts are
    rounded to cents.
    """
    creditors = []  # (-amount, participant)
    debtors = []
    dust = ZERO
    net_sum = ZERO
    for pid, raw in balances.items():
        bal = to_money(raw)
        net_sum += bal
        if bal > SETTLEMENT_EPSILON:
            creditors.append((-bal, pid))
        elif bal < -SETTLEMENT_EPSILON:
            debtors.append((bal, pid))
        else:
            dust += abs(bal)
    heapq.heapify(creditors)
    heapq.heapify(debtors)

    if abs(net_sum) > SETTLEMENT_EPSILON:
        logger.error("Net balances of %d participant(s) add up to %s", len(balances), net_sum)
        raise LedgerInvariantViolation(f"Credits and debits do not balance: nets add up to {net_sum}")

    out: list[SettlementTransaction] = []
    while creditors and debtors:
        neg_credit, cu = heapq.heappop(creditors)
        neg_debt, du = heapq.heappop(debtors)
        credit, debt = -neg_credit, -neg_debt
        transfer = min(credit, debt)
        out.append(SettlementTransaction(from_user=du, to_user=cu, amount=round2(transfer)))
        for rest, pid, queue in ((credit - transfer, cu, creditors), (debt - transfer, du, debtors)):
            if rest > SETTLEMENT_EPSILON:
                heapq.heappush(queue, (-rest, pid))
            else:
                dust += rest

    # Both heaps hold negated amounts; at most one of them is non-empty here.
    leftover = -sum((key for key, _ in creditors + debtors), ZERO)
    if leftover > dust + SETTLEMENT_EPSILON:
        side = "credit" if creditors else "debt"
        logger.error("Unmatched %s of %s left after settling %d transfer(s)", side, leftover, len(out))
        raise LedgerInvariantViolation(
            f"Credits and debits do not balance: {leftover} of unmatched {side} remains"
        )
    return out


def simplify(ledger: BalanceLedger, participants: Optional[Iterable[ParticipantId]] = None) -> list[SettlementTransaction]:
    """
    Propose the transfers that settle participants' debts among themselves
    (everyone in the ledger when participants is None). Works on a snapshot;
    the ledger is not changed.
    """
    balances = ledger.net_balances(participants)
    settlements = compute_settlements(balances)
    logger.info("Simplified %d participant(s) to %d transfer(s)", len(balances), len(settlements))
    return settlements

