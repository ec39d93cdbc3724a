"""Balance ledger: who owes whom, per pair of participants."""
import logging
import threading
from collections import defaultdict
from decimal import Decimal
from typing import Iterable, Optional

from settleup.exceptions import InvalidAmountError, InvalidSplitError
from settleup.models import ParticipantId, Share
from settleup.money import ZERO, is_settled, to_money

logger = logging.getLogger(__name__)

PairDeltas = dict[tuple[ParticipantId, ParticipantId], Decimal]


class BalanceLedger:
    """
    Sparse map of signed pairwise balances.

    bal(P, Q) > 0 means Q owes P; bal(P, Q) < 0 means P owes Q. Both directions
    of a pair are always written together, so bal(P, Q) == -bal(Q, P).
    Balances under one cent are removed instead of being stored as zero.

    Every mutation checks its whole input and collects per-pair deltas first,
    then applies them in one step under the ledger lock. A rejected call
    changes nothing.
    """

    def __init__(self):
        self._balances: dict[ParticipantId, dict[ParticipantId, Decimal]] = {}
        self._lock = threading.RLock()

    # ----- Mutations -----

    def apply_shares(self, payer: ParticipantId, shares: Iterable[Share]) -> None:
        """Everyone but the payer now owes the payer their share."""
        deltas = self._share_deltas(payer, shares, 1)
        self._commit(deltas)
        logger.debug("Applied %d share(s) paid by %s", len(deltas), payer)

    def reverse_shares(self, payer: ParticipantId, shares: Iterable[Share]) -> None:
        """Undo apply_shares for the same payer and shares."""
        deltas = self._share_deltas(payer, shares, -1)
        self._commit(deltas)
        logger.debug("Reversed %d share(s) paid by %s", len(deltas), payer)

    def settle(self, from_user: ParticipantId, to_user: ParticipantId, amount) -> Decimal:
        """
        Record that from_user paid to_user. Paying more than is owed flips the
        balance so from_user becomes the one who is owed.
        """
        value = self._payment_value(from_user, to_user, amount)
        self._commit({(from_user, to_user): value})
        logger.debug("Settled %s from %s to %s", value, from_user, to_user)
        return value

    def settle_many(self, payments: Iterable[tuple[ParticipantId, ParticipantId, object]]) -> list[Decimal]:
        """
        Record a batch of (from_user, to_user, amount) payments as one update.
        If any payment is invalid none of them is applied.
        """
        payments = list(payments)
        values = [self._payment_value(f, t, amount) for f, t, amount in payments]
        deltas: PairDeltas = defaultdict(Decimal)
        for (from_user, to_user, _), value in zip(payments, values):
            deltas[(from_user, to_user)] += value
        self._commit(deltas)
        logger.debug("Settled %d payment(s) in one batch", len(values))
        return values

    @staticmethod
    def _payment_value(from_user: ParticipantId, to_user: ParticipantId, amount) -> Decimal:
        if from_user == to_user:
            raise InvalidAmountError("Payer and recipient must be different")
        value = to_money(amount)
        if value <= 0:
            raise InvalidAmountError(f"Amount must be positive, got {value}")
        return value

    @staticmethod
    def _share_deltas(payer: ParticipantId, shares: Iterable[Share], sign: int) -> PairDeltas:
        deltas: PairDeltas = defaultdict(Decimal)
        for share in shares:
            try:
                amount = to_money(share.amount)
            except InvalidAmountError as e:
                raise InvalidSplitError(str(e)) from None
            if amount < 0:
                raise InvalidSplitError(f"Share amount for participant {share.participant} cannot be negative")
            if share.participant == payer:
                continue
            deltas[(payer, share.participant)] += sign * amount
        return deltas

    def _commit(self, deltas: PairDeltas) -> None:
        with self._lock:
            for (a, b), delta in deltas.items():
                if delta:
                    self._adjust(a, b, delta)

    def _adjust(self, a: ParticipantId, b: ParticipantId, delta: Decimal) -> None:
        value = self._balances.get(a, {}).get(b, ZERO) + delta
        if is_settled(value):
            self._discard(a, b)
            self._discard(b, a)
        else:
            self._balances.setdefault(a, {})[b] = value
            self._balances.setdefault(b, {})[a] = -value

    def _discard(self, a: ParticipantId, b: ParticipantId) -> None:
        row = self._balances.get(a)
        if row is None:
            return
        row.pop(b, None)
        if not row:
            del self._balances[a]

    # ----- Queries -----

    def balance_between(self, a: ParticipantId, b: ParticipantId) -> Decimal:
        """bal(a, b); zero when the two have no open balance."""
        with self._lock:
            return self._balances.get(a, {}).get(b, ZERO)

    def balances_for(self, participant: ParticipantId) -> dict[ParticipantId, Decimal]:
        with self._lock:
            return dict(self._balances.get(participant, {}))

    def participants(self) -> list[ParticipantId]:
        """Participants with at least one open balance."""
        with self._lock:
            return sorted(self._balances)

    def net_balance(self, participant: ParticipantId, among: Optional[Iterable[ParticipantId]] = None) -> Decimal:
        """Sum of participant's balances; positive means net creditor."""
        with self._lock:
            row = self._balances.get(participant, {})
            if among is None:
                return sum(row.values(), ZERO)
            among = set(among)
            return sum((v for q, v in row.items() if q in among), ZERO)

    def net_balances(self, among: Optional[Iterable[ParticipantId]] = None) -> dict[ParticipantId, Decimal]:
        """
        Net balance of each participant, counting only counterparts inside
        among (everyone when None). Taken in one pass under the lock.
        """
        with self._lock:
            if among is None:
                return {p: sum(row.values(), ZERO) for p, row in self._balances.items()}
            members = list(dict.fromkeys(among))
            group = set(members)
            return {
                p: sum((v for q, v in self._balances.get(p, {}).items() if q in group), ZERO)
                for p in members
            }

    def total_owed(self, participant: ParticipantId) -> Decimal:
        """What participant owes everyone else."""
        with self._lock:
            return sum((-v for v in self._balances.get(participant, {}).values() if v < 0), ZERO)

    def total_owed_to(self, participant: ParticipantId) -> Decimal:
        """What everyone else owes participant."""
        with self._lock:
            return sum((v for v in self._balances.get(participant, {}).values() if v > 0), ZERO)

    def snapshot(self) -> dict[ParticipantId, dict[ParticipantId, Decimal]]:
        with self._lock:
            return {p: dict(row) for p, row in self._balances.items()}
