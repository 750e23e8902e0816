import pytest

pytestmark = pytest.mark.anyio


async def test_networks_are_listed(async_client):
    response = await async_client.get("/networks")

    assert response.status_code == 200
    codes = [network["code"] for network in response.json()["networks"]]
    assert codes == ["TRC20", "BEP20", "ERC20", "SOL"]


async def test_topup_credits_amount_minus_fee(async_client):
    response = await async_client.post("/user/alice/topup", json={"amount": 100, "network": "ERC20"})

    assert response.status_code == 200
    body = response.json()
    assert body["balance"] == 95
    newest = body["txs"][0]
    assert newest["type"] == "topup"
    assert newest["amount"] == 95
    assert newest["network"] == "ERC20"
    assert newest["ccy"] == "USDT"
    assert "Fee 5 USDT" in newest["status"]
    assert newest["id"].startswith("topup-")
    assert [tx["type"] for tx in body["txs"]] == ["topup", "reward"]

    stored = (await async_client.get("/user/alice")).json()
    assert stored == body


async def test_topup_unknown_network_uses_first(async_client):
    body = (await async_client.post("/user/alice/topup", json={"amount": 10, "network": "DOGE"})).json()

    assert body["txs"][0]["network"] == "TRC20"
    assert body["balance"] == 9


async def test_topup_smaller_than_fee_credits_nothing(async_client):
    body = (await async_client.post("/user/alice/topup", json={"amount": 0.5, "network": "TRC20"})).json()

    assert body["balance"] == 0
    assert body["txs"][0]["amount"] == 0


@pytest.mark.parametrize("amount", [0, -5])
async def test_topup_rejects_non_positive_amount(async_client, amount):
    response = await async_client.post("/user/alice/topup", json={"amount": amount})

    assert response.status_code == 400
    assert response.json() == {"error": "invalid amount"}


async def test_topup_requires_amount(async_client):
    response = await async_client.post("/user/alice/topup", json={"network": "SOL"})
    assert response.status_code == 422


async def test_withdraw_queues_pending_request(async_client):
    await async_client.post("/user/bob", json={"balance": 50})

    response = await async_client.post("/user/bob/withdraw", json={"amount": 20, "destination": "TXabc"})

    assert response.status_code == 200
    body = response.json()
    assert body["balance"] == 30
    pending = body["pendingWithdrawals"][0]
    assert pending["amount"] == 20
    assert pending["status"] == "Processing"
    assert pending["id"].startswith("wd-")


async def test_withdraw_floors_balance_at_zero(async_client):
    body = (await async_client.post("/user/carol/withdraw", json={"amount": 80})).json()

    assert body["balance"] == 0
    assert len(body["pendingWithdrawals"]) == 1


async def test_withdraw_reports_failed_save(async_client, memory_repository):
    memory_repository.fail_writes = True

    response = await async_client.post("/user/dave/withdraw", json={"amount": 1})

    assert response.status_code == 500
    assert response.json() == {"error": "failed to save"}
