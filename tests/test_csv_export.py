"""Mini README: Tests for the CSV exports.

Structure:
    * BOM prefix and quoting of awkward cells.
    * ledger columns with per-currency balances and month filtering.
    * settlement meta row, entry rows and additional items block.
    * profit export limited to counted events.
"""

from __future__ import annotations

import csv
import io

from moneycheck.events import EventKey
from moneycheck.export import BOM, LEDGER_HEADER, CsvExporter, format_amount
from moneycheck.settlement import ItemCollection


def _rows(text: str):
    assert text.startswith(BOM)
    return list(csv.reader(io.StringIO(text[len(BOM):])))


def test_format_amount_drops_integral_decimals() -> None:
    assert format_amount(1500.0) == "1500"
    assert format_amount(-3) == "-3"
    assert format_amount(2.5) == "2.5"


def test_ledger_export_quotes_and_balances(workspace, make_draft) -> None:
    workspace.add_entry(make_draft("2025-01-02", client="Kim, Lee", memo="x", krw_income=100))
    workspace.add_entry(make_draft("2025-02-03", event_detail='The "big" one', krw_expense=30))

    document = CsvExporter(workspace).ledger()
    rows = _rows(document.text)

    assert document.filename == "ledger_all.csv"
    assert '"Kim, Lee"' in document.text
    assert '"The ""big"" one"' in document.text
    assert rows[0] == LEDGER_HEADER
    assert len(rows[0]) == 5 + 4 * 3
    assert rows[1][:5] == ["2025-02", "02-03", "-", "-", 'The "big" one']
    assert rows[1][5:8] == ["0", "30", "70"]
    assert rows[2][:3] == ["2025-01", "01-02", "Kim, Lee"]
    assert rows[2][5:8] == ["100", "0", "100"]


def test_month_ledger_export(workspace, make_draft) -> None:
    workspace.add_entry(make_draft("2025-01-02", usd_income=10))
    workspace.add_entry(make_draft("2025-02-03", usd_income=5))

    document = CsvExporter(workspace).ledger("2025-02")
    rows = _rows(document.text)

    assert document.filename == "ledger_2025-02.csv"
    assert len(rows) == 2
    assert rows[1][-1] == "15"


def test_settlement_export_layout(workspace, make_draft) -> None:
    workspace.add_entry(
        make_draft("2025-05-09", event_name="River Cruise", client="Han", bb_income=40, memo="deck")
    )
    key = EventKey(month="2025-05", name="river cruise")
    workspace.settlements.update_field(key, {"fixed_price_baht_income": 100})
    item = workspace.settlements.add_additional_item(key)
    workspace.settlements.update_item(
        key, ItemCollection.ADDITIONAL_ITEMS, item.id, {"name": "Snacks", "expense": 12}
    )

    document = CsvExporter(workspace).settlement(key)
    rows = _rows(document.text)

    assert document.filename == "settlement_River_Cruise.csv"
    assert rows[0][0] == "Event"
    assert rows[1][0] == "River Cruise"
    assert rows[1][7:10] == ["140", "12", "128"]
    assert rows[2][11:] == ["2025-05-09", "Han", "", "140", "0", "deck"]
    assert rows[3] == [""] * len(rows[0])
    assert rows[4][11] == "Additional items"
    assert rows[5][12] == "Snacks"
    assert rows[5][15] == "12"


def test_profit_export_lists_counted_events_and_expenses(workspace, make_draft) -> None:
    kept = workspace.add_entry(make_draft("2025-06-01", event_name="Safari", client="P", bb_income=30))
    gone = workspace.add_entry(make_draft("2025-06-02", event_name="Dinner", client="C", bb_income=9))
    workspace.profit_overview()
    workspace.delete_entry(gone.id)
    workspace.profit.add_expense("Rent", 7)

    rows = _rows(CsvExporter(workspace).profit().text)

    assert rows[0] == ["Type", "Month", "Item", "Amount"]
    income_rows = [row for row in rows if row[0] == "Income" and row[2]]
    assert income_rows == [["Income", "2025-06", kept.event_name, "30"]]
    assert ["Expense", "", "Rent", "7"] in rows



def test_settlement_export_rows_use_stored_price(workspace, make_draft) -> None:
    workspace.add_entry(
        make_draft("2025-05-09", event_name="River Cruise", client="Han", krw_income=1000, bb_income=5)
    )
    key = EventKey(month="2025-05", name="river cruise")
    workspace.settlements.update_field(key, {"baht_exchange_rate_income": 0.5})

    rows = _rows(CsvExporter(workspace).settlement(key).text)

    assert rows[2][11:16] == ["2025-05-09", "Han", "", "5", "0"]
