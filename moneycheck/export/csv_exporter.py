"""Mini README: Spreadsheet-friendly CSV exports of ledger data.

Structure:
    * ExportDocument - filename plus BOM-prefixed CSV text, writable to disk.
    * format_amount - renders numbers without a trailing ``.0`` when integral.
    * CsvExporter - builds the ledger, month, settlement and profit exports.

Every export starts with a UTF-8 byte-order mark so spreadsheet software
detects the encoding. Cells containing a comma, quote or line break are quoted
with internal quotes doubled. Column sets are fixed per export kind.
"""

from __future__ import annotations

import csv
import io
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, List, Optional, Sequence

from ..events import KeyLike, coerce_key, groups_by_month
from ..ledger import Currency, compute_balances, sort_for_display
from ..logging_utils import get_logger
from ..workspace import LedgerWorkspace

LOGGER = get_logger(__name__)

BOM = "\ufeff"
_UNSAFE_FILENAME = re.compile(r'[\\/:*?"<>|\s]+')

LEDGER_HEADER = ["Month", "Day", "Client", "Event", "Detail"] + [
    f"{currency.label} {column}"
    for currency in Currency
    for column in ("In", "Out", "Balance")
]
SETTLEMENT_META_HEADER = [
    "Event",
    "KRW fixed price (income)",
    "Baht rate (income)",
    "Baht fixed price (income)",
    "KRW fixed price (expense)",
    "Baht rate (expense)",
    "Baht fixed price (expense)",
    "Total income",
    "Total expense",
    "Total profit",
    "",
]
SETTLEMENT_ROW_HEADER = ["Date", "Client", "Detail", "Income", "Expense", "Memo"]
PROFIT_HEADER = ["Type", "Month", "Item", "Amount"]


def format_amount(value: float) -> str:
    if float(value).is_integer():
        return str(int(value))
    return repr(float(value))


def _filename_part(text: str) -> str:
    return _UNSAFE_FILENAME.sub("_", text.strip()) or "untitled"


def render_csv(rows: Iterable[Sequence[object]]) -> str:
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n", quoting=csv.QUOTE_MINIMAL)
    for row in rows:
        writer.writerow(["" if cell is None else str(cell) for cell in row])
    return BOM + buffer.getvalue()


@dataclass(frozen=True, slots=True)
class ExportDocument:
    filename: str
    text: str

    def write(self, directory: Path) -> Path:
        directory.mkdir(parents=True, exist_ok=True)
        destination = directory / self.filename
        # The BOM is already part of the text.
        destination.write_text(self.text, encoding="utf-8", newline="")
        LOGGER.info("Exported %s", destination)
        return destination


class CsvExporter:
    """Render workspace data as CSV documents."""

    def __init__(self, workspace: LedgerWorkspace) -> None:
        self._workspace = workspace

    def ledger(self, month: Optional[str] = None) -> ExportDocument:
        """Every entry (or one month) newest first with running balances."""

        entries = self._workspace.entries.list()
        balances = compute_balances(entries)
        grouped = groups_by_month(sort_for_display(entries))
        months = [month] if month else sorted(grouped, reverse=True)

        rows: List[List[str]] = [LEDGER_HEADER]
        for ym in months:
            for entry in grouped.get(ym, []):
                balance = balances[entry.id]
                row = [
                    ym,
                    entry.date[5:],
                    entry.client or "-",
                    entry.event_name or "-",
                    entry.event_detail or "-",
                ]
                for currency in Currency:
                    pair = entry.amounts(currency)
                    row += [
                        format_amount(pair.income),
                        format_amount(pair.expense),
                        format_amount(balance.of(currency)),
                    ]
                rows.append(row)
        filename = f"ledger_{month}.csv" if month else "ledger_all.csv"
        LOGGER.debug("Prepared ledger export %s with %s rows", filename, len(rows) - 1)
        return ExportDocument(filename=filename, text=render_csv(rows))

    def settlement(self, key: KeyLike) -> ExportDocument:
        """Meta totals row, then entry rows, then the additional items block."""

        event_key = coerce_key(key)
        summary = self._workspace.settlements.compute_summary(event_key)
        report = self._workspace.settlements.report(event_key)
        name = summary.event_name or "settlement"
        width = len(SETTLEMENT_META_HEADER) + len(SETTLEMENT_ROW_HEADER)
        padding = [""] * len(SETTLEMENT_META_HEADER)

        def stored(value: Optional[float]) -> str:
            return format_amount(value or 0.0)

        meta = [
            name,
            stored(report.fixed_price_krw_income if report else None),
            stored(report.baht_exchange_rate_income if report else None),
            stored(report.fixed_price_baht_income if report else None),
            stored(report.fixed_price_krw_expense if report else None),
            stored(report.baht_exchange_rate_expense if report else None),
            stored(report.fixed_price_baht_expense if report else None),
            format_amount(summary.total_income),
            format_amount(summary.total_expense),
            format_amount(summary.total_profit),
            "",
        ]
        rows: List[List[str]] = [
            SETTLEMENT_META_HEADER + SETTLEMENT_ROW_HEADER,
            meta + [""] * len(SETTLEMENT_ROW_HEADER),
        ]
        for row in self._workspace.settlements.settlement_rows(event_key, displayed=False):
            rows.append(
                padding
                + [
                    row.entry.date,
                    row.entry.client,
                    row.entry.event_detail,
                    format_amount(row.income),
                    format_amount(row.expense),
                    row.entry.memo,
                ]
            )
        if report and report.additional_items:
            rows.append([""] * width)
            rows.append(padding + ["Additional items"] + [""] * (len(SETTLEMENT_ROW_HEADER) - 1))
            for item in report.additional_items:
                rows.append(
                    padding
                    + [
                        "",
                        item.name,
                        "",
                        format_amount(item.income),
                        format_amount(item.expense),
                        "",
                    ]
                )
        return ExportDocument(
            filename=f"settlement_{_filename_part(name)}.csv", text=render_csv(rows)
        )

    def profit(self) -> ExportDocument:
        """Counted income lines newest month first, then manual expenses."""

        totals = self._workspace.profit_overview()
        rows: List[List[str]] = [PROFIT_HEADER, ["Income", "", "", ""]]
        for line in totals.lines:
            if not line.counted:
                continue
            rows.append(["Income", line.month, line.event_name, format_amount(line.amount)])
        rows.append(["", "", "", ""])
        rows.append(["Expense", "", "", ""])
        for expense in totals.expenses:
            rows.append(["Expense", "", expense.label, format_amount(expense.amount)])
        return ExportDocument(filename="profit.csv", text=render_csv(rows))
