import pytest


@pytest.fixture
def dinner(client):
    res = client.post("/api/expenses", json={
        "payer_id": 1, "amount": 90.0, "participant_ids": [1, 2, 3],
    })
    return res.json()


def test_create_expense(client, dinner):
    assert dinner["payer_id"] == 1
    assert dinner["split_type"] == "equal"
    assert [s["amount"] for s in dinner["shares"]] == [30.0, 30.0, 30.0]
    res = client.get("/api/balances/1/2")
    assert res.json()["amount"] == 30.0
    res = client.get("/api/balances/2/1")
    assert res.json()["amount"] == -30.0


def test_create_expense_exact(client):
    res = client.post("/api/expenses", json={
        "payer_id": 1, "amount": 50.0, "participant_ids": [2, 3],
        "split_type": "exact", "shares": {"2": 20, "3": 30},
    })
    assert res.status_code == 200
    assert client.get("/api/balances/3/1").json()["amount"] == -30.0


def test_invalid_expense_changes_nothing(client, service):
    res = client.post("/api/expenses", json={
        "payer_id": 1, "amount": -5.0, "participant_ids": [1, 2],
    })
    assert res.status_code == 400
    res = client.post("/api/expenses", json={
        "payer_id": 1, "amount": 10.0, "participant_ids": [],
    })
    assert res.status_code == 400
    assert "At least one participant required" in res.json()["detail"]
    assert service.ledger.snapshot() == {}


def test_reverse_expense(client, service, dinner):
    res = client.post("/api/expenses/reverse", json={
        "payer_id": 1, "amount": dinner["amount"], "split_type": dinner["split_type"],
        "shares": dinner["shares"],
    })
    assert res.status_code == 204
    assert client.get("/api/balances/1/2").json()["amount"] == 0.0
    assert service.ledger.snapshot() == {}


def test_reverse_rejects_inconsistent_shares(client, service, dinner):
    before = service.ledger.snapshot()
    res = client.post("/api/expenses/reverse", json={
        "payer_id": 1, "amount": 90.0, "split_type": "equal",
        "shares": [{"participant_id": 2, "amount": 30.0}],
    })
    assert res.status_code == 400
    res = client.post("/api/expenses/reverse", json={
        "payer_id": 1, "amount": 90.0, "split_type": "bogus", "shares": dinner["shares"],
    })
    assert res.status_code == 400
    assert service.ledger.snapshot() == before
