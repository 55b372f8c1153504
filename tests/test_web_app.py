"""Mini README: Tests for the FastAPI collaborator.

Structure:
    * entry submission, listing and deletion through form posts.
    * settlement detail, field updates, staged item edits and commit.
    * profit toggles, overrides and expenses.
    * CSV export responses.
    * staged profit overrides and displayed settlement prices.
"""

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from moneycheck.export import BOM
from moneycheck.interface import create_application
from moneycheck.workspace import LedgerWorkspace

KEY = "2025-05::city tour"


@pytest.fixture
def client(workspace) -> TestClient:
    return TestClient(create_application(workspace))


def _post_tour(client: TestClient, **fields: str):
    data = {"date": "20250510", "event_name": "City Tour", "client": "Lee"}
    data.update(fields)
    return client.post("/entries", data=data)


def test_entry_submission_and_listing(client: TestClient) -> None:
    response = _post_tour(client, krw_income="1500", bb_income="oops")

    assert response.status_code == 200
    entry = response.json()["entry"]
    assert entry["date"] == "2025-05-10"
    assert entry["bb_income"] == 0

    listing = client.get("/entries", params={"month": "2025-05"}).json()
    assert listing["count"] == 1
    assert listing["entries"][0]["balance"]["krw"] == 1500


def test_blank_date_is_ignored(client: TestClient) -> None:
    response = client.post("/entries", data={"date": " ", "krw_income": "10"})

    assert response.json() == {"entry": None}
    assert client.get("/entries").json()["count"] == 0


def test_delete_entry_leaves_orphaned_settlement(client: TestClient) -> None:
    entry_id = _post_tour(client).json()["entry"]["id"]

    assert client.delete(f"/entries/{entry_id}").json() == {"deleted": True}
    assert client.delete(f"/entries/{entry_id}").json() == {"deleted": False}

    detail = client.get("/settlement", params={"key": KEY}).json()
    assert detail["summary"]["status"] == "orphaned"
    assert detail["report"]["event_name"] == "City Tour"


def test_settlement_field_and_exchange_rate(client: TestClient) -> None:
    _post_tour(client, krw_income="10000", kb_income="20")

    summary = client.post(
        "/settlement/fields", data={"key": KEY, "field": "fixed_price_baht_expense", "value": "5"}
    ).json()
    assert summary["total_expense"] == 5

    summary = client.post(
        "/settlement/exchange-rate", data={"key": KEY, "side": "income", "rate": "0.5"}
    ).json()
    assert summary["baht_fixed_income"] == 5000
    assert summary["total_income"] == 5020

    missing = client.post("/settlement/fields", data={"key": "2020-01::x", "field": "tour_fee"})
    assert missing.status_code == 404
    bad_side = client.post(
        "/settlement/exchange-rate", data={"key": KEY, "side": "sideways", "rate": "1"}
    )
    assert bad_side.status_code == 400


def test_staged_item_edit_and_commit(client: TestClient, store) -> None:
    _post_tour(client)
    item = client.post("/settlement/additional_items", data={"key": KEY}).json()["item"]

    staged = client.post(
        f"/settlement/additional_items/{item['id']}/stage",
        data={"key": KEY, "field": "income", "value": "80"},
    )
    assert staged.json() == {"staged": True}
    assert '"income": 0.0' in store.raw("settlement_reports")

    assert client.post("/commit").json() == {"committed": True}
    assert '"income": 80.0' in store.raw("settlement_reports")

    detail = client.get("/settlement", params={"key": KEY}).json()
    assert detail["summary"]["additional_income"] == 80

    deleted = client.delete(f"/settlement/additional_items/{item['id']}", params={"key": KEY})
    assert deleted.json() == {"deleted": True}
    assert client.post("/settlement/nonsense", data={"key": KEY}).status_code == 404


def test_profit_routes(client: TestClient) -> None:
    _post_tour(client, bb_income="300")
    overview = client.get("/profit").json()
    assert overview["total_income"] == 300

    overview = client.post("/profit/override", data={"key": KEY, "amount": "120"}).json()
    assert overview["total_income"] == 120

    overview = client.post("/profit/toggle", data={"key": KEY, "enabled": "false"}).json()
    assert overview["total_income"] == 0

    expense = client.post("/profit/expenses", data={"label": "Rent", "amount": "40"}).json()
    expense_id = expense["expense"]["id"]
    client.post(f"/profit/expenses/{expense_id}", data={"amount": "45"})
    assert client.get("/profit").json()["total_expense"] == 45
    assert client.delete(f"/profit/expenses/{expense_id}").json() == {"deleted": True}
    assert client.post("/profit/toggle", data={"key": "x", "enabled": "true"}).status_code == 404


def test_csv_exports(client: TestClient) -> None:
    _post_tour(client, bb_income="300", memo="a, b")

    ledger = client.get("/export/ledger")
    assert ledger.headers["content-type"].startswith("text/csv")
    assert "ledger_all.csv" in ledger.headers["content-disposition"]
    assert ledger.content.decode("utf-8").startswith(BOM)

    settlement = client.get("/export/settlement", params={"key": KEY})
    assert settlement.status_code == 200
    assert '"a, b"' in settlement.content.decode("utf-8")
    assert client.get("/export/settlement", params={"key": "none"}).status_code == 404
    assert client.get("/export/profit").status_code == 200


def test_reset(client: TestClient) -> None:
    _post_tour(client)

    assert client.post("/reset").json() == {"reset": True}
    assert client.get("/").json()["entry_count"] == 0


def test_staged_override_waits_for_commit(client: TestClient, store) -> None:
    _post_tour(client, bb_income="300")
    client.get("/profit")

    staged = client.post("/profit/override", data={"key": KEY, "amount": "1", "stage": "true"})
    assert staged.json()["total_income"] == 1
    client.get("/profit")
    client.get("/")
    assert LedgerWorkspace(store).profit.income(KEY).amount_override is None

    assert client.post("/commit").json() == {"committed": True}
    assert LedgerWorkspace(store).profit.income(KEY).amount_override == 1


def test_settlement_detail_rows_use_displayed_price(client: TestClient) -> None:
    _post_tour(client, krw_income="1000", bb_income="5")
    client.post(
        "/settlement/fields", data={"key": KEY, "field": "baht_exchange_rate_income", "value": "0.5"}
    )

    detail = client.get("/settlement", params={"key": KEY}).json()

    assert detail["summary"]["displayed_baht_income"] == 500
    assert detail["rows"][0]["income"] == 505
