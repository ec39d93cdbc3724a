"""Entry points used by the expense/payment layer: splits, ledger hooks and settle-up proposals."""
import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Iterable, Optional, Union

from settleup.models import ParticipantId, SettlementTransaction, SplitKind, SplitResult, Transaction
from settleup.services import settlement_calculator
from settleup.services.ledger import BalanceLedger
from settleup.services.splits import SplitInputs, compute_split, validate_split
from settleup.services.transactions import TransactionLog

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BalanceSummary:
    participant: ParticipantId
    balances: dict
    total_owed: Decimal
    total_owed_to: Decimal

    @property
    def net_balance(self) -> Decimal:
        return self.total_owed_to - self.total_owed


class LedgerService:
    def __init__(self, ledger: Optional[BalanceLedger] = None):
        self.ledger = ledger or BalanceLedger()
        self.transactions = TransactionLog(self.ledger)

    def compute_split(
        self,
        kind: Union[SplitKind, str],
        total,
        participants: Iterable[ParticipantId],
        amounts: SplitInputs = None,
        percentages: SplitInputs = None,
    ) -> SplitResult:
        return compute_split(kind, total, participants, amounts=amounts, percentages=percentages)

    def apply_expense(self, payer: ParticipantId, split: SplitResult) -> None:
        """Hook for a newly created expense. The split is re-validated before the ledger changes."""
        validate_split(split.kind, split.total, split.shares)
        self.ledger.apply_shares(payer, split.shares)
        logger.info("Applied %s expense of %s paid by %s", split.kind.value, split.total, payer)

    def reverse_expense(self, payer: ParticipantId, split: SplitResult) -> None:
        """Hook for a deleted expense; takes the split that was applied."""
        validate_split(split.kind, split.total, split.shares)
        self.ledger.reverse_shares(payer, split.shares)
        logger.info("Reversed %s expense of %s paid by %s", split.kind.value, split.total, payer)

    def record_settlement(self, from_user: ParticipantId, to_user: ParticipantId, amount) -> Transaction:
        return self.transactions.record(from_user, to_user, amount)

    def balance_between(self, a: ParticipantId, b: ParticipantId) -> Decimal:
        return self.ledger.balance_between(a, b)

    def simplify(self, participants: Optional[Iterable[ParticipantId]] = None) -> list[SettlementTransaction]:
        return settlement_calculator.simplify(self.ledger, participants)

    def apply_settlements(self, settlements: Iterable[SettlementTransaction]) -> list[Transaction]:
        return self.transactions.apply_settlements(settlements)

    def balance_summary(self, participant: ParticipantId) -> BalanceSummary:
        return BalanceSummary(
            participant=participant,
            balances=self.ledger.balances_for(participant),
            total_owed=self.ledger.total_owed(participant),
            total_owed_to=self.ledger.total_owed_to(participant),
        )

    def transactions_for(self, participant: Optional[ParticipantId] = None) -> list[Transaction]:
        if participant is None:
            return self.transactions.all()
        return self.transactions.history_for(participant)
