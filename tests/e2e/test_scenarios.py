"""
E2E scenarios through the HTTP API.

Feed payloads come from the stub files served by the mock feed server
(mock/feed_stub), pushed through /api/ingest so no server needs to run:
- Hapoalim: checking account with salary, rent and card settlements
- VisaCal: card purchases
"""

import json
import pytest
from pathlib import Path
from fastapi.testclient import TestClient

FEED_STUB_DIR = Path(__file__).resolve().parents[2] / "mock" / "feed_stub"


def _load_stub(account: str) -> dict:
    payload = json.loads((FEED_STUB_DIR / f"transactions_{account}.json").read_text(encoding="utf-8"))
    return {"account": account, "transactions": payload["transactions"]}


@pytest.fixture
def stub_accounts(client: TestClient) -> None:
    for account in ("Hapoalim", "VisaCal"):
        response = client.post("/api/ingest", json=_load_stub(account))
        assert response.status_code == 200


def test_early_february_salary_belongs_to_january(client: TestClient):
    """
    Salary dated 2024-02-01
    Expected: counted in January, absent from February
    """
    client.post(
        "/api/ingest",
        json={
            "account": "Hapoalim",
            "transactions": [{"date": "2024-02-01", "amount": 1300000, "description": "משכורת פברואר"}],
        },
    )

    january = client.get("/api/summary/2024/1").json()
    february = client.get("/api/summary/2024/2").json()

    assert [t["description"] for t in january["transactions"]] == ["משכורת פברואר"]
    assert january["income"] == 1300000
    assert february["transactions"] == []
    assert february["income"] == 0


def test_available_for_variable_budget(client: TestClient):
    """
    Savings goal 2,000, expected income 13,500, fixed expenses 8,000
    Expected: 3,500 left for variable spending
    """
    client.post(
        "/api/ingest",
        json={
            "account": "Hapoalim",
            "transactions": [{"date": "2024-05-10", "amount": -800000, "description": "שכר דירה"}],
        },
    )
    summary = client.get("/api/summary/2024/5").json()
    housing = client.post("/api/categories", json={"name": "דיור"}).json()
    client.post(
        "/api/transactions/category",
        json={"transaction_id": summary["transactions"][0]["id"], "category_id": housing["id"]},
    )
    client.post("/api/savings-goal", json={"goal": 200000})
    client.post("/api/expected-income", json={"income": 1350000})

    data = client.get("/api/available-budget/2024/5").json()

    assert data["expected_income"] == 1350000
    assert data["savings_goal"] == 200000
    assert data["fixed_expenses"] == 800000
    assert data["available_for_variable"] == 350000


def test_stub_feed_january(client: TestClient, stub_accounts):
    """
    Both accounts, January 2024
    Expected: early-January bills move to December, early-February bills join January
    """
    data = client.get("/api/summary/2024/1").json()

    assert data["income"] == 1300000
    assert data["expenses"] == 1054260
    assert data["transfers_out"] == 780000
    assert data["transaction_count"] == 7


def test_stub_feed_december_and_february(client: TestClient, stub_accounts):
    """Test neighbouring months receive the shifted bills"""
    december = client.get("/api/summary/2023/12").json()
    february = client.get("/api/summary/2024/2").json()

    assert (december["income"], december["expenses"]) == (1300000, 450000)
    assert (february["income"], february["expenses"]) == (0, 65810)


def test_stub_feed_months_and_year(client: TestClient, stub_accounts):
    """Test month list and logical year over both accounts"""
    assert client.get("/api/months").json() == {"months": ["2024-02", "2024-01", "2023-12"]}

    year = client.get("/api/ytd/2024").json()
    assert year["income"] == 1300000
    assert year["expenses"] == 1120070
    assert year["balance"] == 179930
    assert year["transaction_count"] == 9


def test_stub_feed_categorize_and_average(client: TestClient, stub_accounts):
    """
    Categorizing one supermarket row teaches the rule for the rest
    Expected: March average reflects January and February supermarket spend
    """
    groceries = client.post("/api/categories", json={"name": "סופר"}).json()
    january = client.get("/api/summary/2024/1").json()
    supermarket_id = next(t["id"] for t in january["transactions"] if t["description"] == "שופרסל דיל")

    response = client.post(
        "/api/transactions/category",
        json={"transaction_id": supermarket_id, "category_id": groceries["id"]},
    )
    assert response.json()["cascaded"] == 2

    averages = client.get("/api/category-averages/2024/3").json()["averages"]
    # January 55,860 and February 27,810 over two non-empty months
    assert averages[groceries["id"]] == 41835
