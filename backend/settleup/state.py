"""Process-wide ledger, handed to routes as a dependency."""
from settleup.services.ledger_service import LedgerService

_service = LedgerService()


def get_ledger_service() -> LedgerService:
    return _service
