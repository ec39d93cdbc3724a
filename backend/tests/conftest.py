import pytest
from fastapi.testclient import TestClient

from settleup.main import app
from settleup.services.ledger import BalanceLedger
from settleup.services.ledger_service import LedgerService
from settleup.state import get_ledger_service


@pytest.fixture
def service():
    return LedgerService()


@pytest.fixture
def ledger():
    return BalanceLedger()


@pytest.fixture
def client(service):
    app.dependency_overrides[get_ledger_service] = lambda: service
    yield TestClient(app)
    app.dependency_overrides.clear()