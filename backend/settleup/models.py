"""Domain records: shares, split results and settlement transactions."""
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum
from typing import Hashable, Iterator, Optional

# Participants are opaque ids owned by the user layer. They must be hashable,
# and orderable among themselves (all ints or all strings) for stable output.
ParticipantId = Hashable


class SplitKind(str, Enum):
    EQUAL = "equal"
    EXACT = "exact"
    PERCENTAGE = "percentage"


class TransactionType(str, Enum):
    PAYMENT = "payment"
    SETTLEMENT = "settlement"


@dataclass(frozen=True)
class Share:
    participant: ParticipantId
    amount: Decimal
    percentage: Optional[Decimal] = None


@dataclass(frozen=True)
class SplitResult:
    """Shares in participant input order; amounts sum to total."""

    kind: SplitKind
    total: Decimal
    shares: tuple[Share, ...]

    def __iter__(self) -> Iterator[Share]:
        return iter(self.shares)

    def __len__(self) -> int:
        return len(self.shares)

    @property
    def amounts(self) -> list[Decimal]:
        return [s.amount for s in self.shares]

    @property
    def participants(self) -> list[ParticipantId]:
        return [s.participant for s in self.shares]

    def amount_for(self, participant: ParticipantId) -> Decimal:
        for s in self.shares:
            if s.participant == participant:
                return s.amount
        return Decimal("0")


@dataclass(frozen=True)
class SettlementTransaction:
    """Proposed transfer: from_user (debtor) pays to_user (creditor)."""

    from_user: ParticipantId
    to_user: ParticipantId
    amount: Decimal


@dataclass(frozen=True)
class Transaction:
    """A payment that has been applied to the ledger."""

    from_user: ParticipantId
    to_user: ParticipantId
    amount: Decimal
    type: TransactionType = TransactionType.PAYMENT
    id: str = field(default_factory=lambda: uuid.uuid4().hex)
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def involves(self, participant: ParticipantId) -> bool:
        return participant in (self.from_user, self.to_user)
