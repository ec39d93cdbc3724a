"""Payment history: every transfer applied to the ledger, newest first."""
import logging
import threading
from typing import Iterable, Optional

from settleup.models import ParticipantId, SettlementTransaction, Transaction, TransactionType
from settleup.services.ledger import BalanceLedger

logger = logging.getLogger(__name__)


class TransactionLog:
    """Append-only record of payments, applied to the ledger as they are recorded."""

    def __init__(self, ledger: BalanceLedger):
        self.ledger = ledger
        self._transactions: list[Transaction] = []
        self._lock = threading.Lock()

    def record(
        self,
        from_user: ParticipantId,
        to_user: ParticipantId,
        amount,
        type: TransactionType = TransactionType.PAYMENT,
    ) -> Transaction:
        with self._lock:
            value = self.ledger.settle(from_user, to_user, amount)
            txn = Transaction(from_user=from_user, to_user=to_user, amount=value, type=TransactionType(type))
            self._transactions.append(txn)
        logger.info("Recorded %s %s: %s pays %s %s", txn.type.value, txn.id, from_user, to_user, value)
        return txn

    def apply_settlements(self, settlements: Iterable[SettlementTransaction]) -> list[Transaction]:
        """
        Apply proposed transfers as one ledger update and record each of them.
        Every item is checked first; a bad item leaves the ledger and the
        history as they were.
        """
        settlements = list(settlements)
        with self._lock:
            values = self.ledger.settle_many((s.from_user, s.to_user, s.amount) for s in settlements)
            txns = [
                Transaction(from_user=s.from_user, to_user=s.to_user, amount=value, type=TransactionType.SETTLEMENT)
                for s, value in zip(settlements, values)
            ]
            self._transactions.extend(txns)
        logger.info("Applied %d settlement(s)", len(txns))
        return txns

    def get(self, transaction_id: str) -> Optional[Transaction]:
        with self._lock:
            return next((t for t in self._transactions if t.id == transaction_id), None)

    def all(self) -> list[Transaction]:
        with self._lock:
            return list(reversed(self._transactions))

    def history_for(self, participant: ParticipantId) -> list[Transaction]:
        return [t for t in self.all() if t.involves(participant)]

    def between(self, a: ParticipantId, b: ParticipantId) -> list[Transaction]:
        return [t for t in self.all() if t.involves(a) and t.involves(b)]

    def by_type(self, type: TransactionType) -> list[Transaction]:
        return [t for t in self.all() if t.type == TransactionType(type)]
