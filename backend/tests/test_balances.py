def test_balance_summary(client):
    client.post("/api/expenses", json={"payer_id": 1, "amount": 90.0, "participant_ids": [1, 2, 3]})
    client.post("/api/expenses", json={"payer_id": 2, "amount": 10.0, "participant_ids": [1]})
    res = client.get("/api/balances/1")
    assert res.status_code == 200
    data = res.json()
    assert data["balances"] == [{"user_id": 2, "amount": 20.0}, {"user_id": 3, "amount": 30.0}]
    assert data["total_owed_to"] == 50.0
    assert data["total_owed"] == 0.0
    assert data["net_balance"] == 50.0

    data = client.get("/api/balances/3").json()
    assert data["total_owed"] == 30.0
    assert data["net_balance"] == -30.0


def test_unknown_users_have_zero_balance(client):
    res = client.get("/api/balances/7/8")
    assert res.status_code == 200
    assert res.json() == {"user_id": 7, "other_user_id": 8, "amount": 0.0}
    assert client.get("/api/balances/7").json()["balances"] == []
