"""Mini README: FastAPI collaborator exposing the ledger over HTTP.

Structure:
    * create_application - application factory wiring routes to a workspace.

The interface only translates requests into workspace calls and serialises
the results. Totals, balances and defaults are always computed by the core;
this layer never does arithmetic of its own. Mutations arrive as form fields,
reads return JSON, exports return ``text/csv`` attachments.
"""

from __future__ import annotations

from typing import Dict, Optional
from urllib.parse import quote

from fastapi import FastAPI, Form, HTTPException
from fastapi.responses import JSONResponse, Response

from ..configuration import get_settings
from ..events import EventKey
from ..export import CsvExporter, ExportDocument
from ..ledger import Currency
from ..logging_utils import get_logger
from ..settlement import ItemCollection, SettlementSide
from ..workspace import LedgerWorkspace

LOGGER = get_logger(__name__)


def _csv_response(document: ExportDocument) -> Response:
    return Response(
        content=document.text.encode("utf-8"),
        media_type="text/csv; charset=utf-8",
        headers={
            "Content-Disposition": f"attachment; filename*=UTF-8''{quote(document.filename)}"
        },
    )


def _parse_collection(value: str) -> ItemCollection:
    try:
        return ItemCollection.from_str(value)
    except ValueError as error:
        raise HTTPException(status_code=404, detail=str(error)) from error


def create_application(workspace: Optional[LedgerWorkspace] = None) -> FastAPI:
    """Create the FastAPI application bound to ``workspace`` (or the configured one)."""

    app = FastAPI(title="Money Check", version="0.1.0")
    if workspace is None:
        workspace = LedgerWorkspace.from_settings(get_settings())
    exporter = CsvExporter(workspace)

    def require_report(key: str) -> EventKey:
        event_key = EventKey.parse(key)
        if workspace.settlements.report(event_key) is None:
            raise HTTPException(status_code=404, detail=f"Settlement {key} not found")
        return event_key

    @app.get("/")
    async def overview() -> JSONResponse:
        """Counts and headline totals for a landing view."""

        totals = workspace.profit_overview()
        LOGGER.debug(
            "Overview -> entries: %s events: %s profit: %s",
            len(workspace.entries),
            len(totals.lines),
            totals.total_profit,
        )
        return JSONResponse(
            {
                "entry_count": len(workspace.entries),
                "months": workspace.months(),
                "event_count": len(workspace.events()),
                "total_profit": totals.total_profit,
            }
        )

    @app.get("/entries")
    async def list_entries(month: Optional[str] = None) -> JSONResponse:
        """Entries newest first, each with its ledger-wide running balance."""

        rows = [
            {
                **row.entry.as_dict(),
                "month": row.entry.month,
                "balance": {currency.value: row.balance.of(currency) for currency in Currency},
            }
            for row in workspace.ledger(month)
        ]
        return JSONResponse({"count": len(rows), "entries": rows})

    @app.post("/entries")
    async def add_entry(
        date: str = Form(""),
        client: str = Form(""),
        event_name: str = Form(""),
        event_detail: str = Form(""),
        memo: str = Form(""),
        krw_income: str = Form("0"),
        krw_expense: str = Form("0"),
        bb_income: str = Form("0"),
        bb_expense: str = Form("0"),
        kb_income: str = Form("0"),
        kb_expense: str = Form("0"),
        usd_income: str = Form("0"),
        usd_expense: str = Form("0"),
    ) -> JSONResponse:
        """Record a submitted entry; a blank date is silently ignored."""

        entry = workspace.add_entry(
            {
                "date": date,
                "client": client,
                "event_name": event_name,
                "event_detail": event_detail,
                "memo": memo,
                "krw_income": krw_income,
                "krw_expense": krw_expense,
                "bb_income": bb_income,
                "bb_expense": bb_expense,
                "kb_income": kb_income,
                "kb_expense": kb_expense,
                "usd_income": usd_income,
                "usd_expense": usd_expense,
            }
        )
        return JSONResponse({"entry": entry.as_dict() if entry else None})

    @app.delete("/entries/{entry_id}")
    async def delete_entry(entry_id: str) -> JSONResponse:
        return JSONResponse({"deleted": workspace.delete_entry(entry_id)})

    @app.post("/reset")
    async def reset() -> JSONResponse:
        workspace.reset_all()
        return JSONResponse({"reset": True})

    @app.get("/events")
    async def list_events() -> JSONResponse:
        index = workspace.index()
        payload = [
            {
                "key": str(event.key),
                "name": event.display_name,
                "month": event.month,
                "total_profit": workspace.settlements.compute_summary(event.key, index).total_profit,
            }
            for event in index.events()
        ]
        return JSONResponse({"count": len(payload), "events": payload})

    @app.get("/settlement")
    async def settlement_detail(key: str) -> JSONResponse:
        """Summary, stored report and rows for one event key."""

        event_key = EventKey.parse(key)
        summary = workspace.settlements.compute_summary(event_key)
        report = workspace.settlements.report(event_key)
        rows = [
            {
                "entry_id": row.entry.id,
                "date": row.entry.date,
                "client": row.entry.client,
                "event_detail": row.entry.event_detail,
                "income": row.income,
                "expense": row.expense,
                "memo": row.entry.memo,
            }
            for row in workspace.settlements.settlement_rows(event_key)
        ]
        guide_options = []
        if report is not None:
            guide_options = [
                {**option.as_dict(), "profit": option.profit} for option in report.guide_options
            ]
        return JSONResponse(
            {
                "summary": summary.as_dict(),
                "report": report.as_dict() if report else None,
                "guide_options": guide_options,
                "rows": rows,
            }
        )

    @app.post("/settlement/fields")
    async def update_settlement_field(
        key: str = Form(...), field: str = Form(...), value: str = Form("")
    ) -> JSONResponse:
        event_key = require_report(key)
        workspace.settlements.update_field(event_key, {field: value})
        return JSONResponse(workspace.settlements.compute_summary(event_key).as_dict())

    @app.post("/settlement/exchange-rate")
    async def commit_exchange_rate(
        key: str = Form(...),
        side: str = Form(...),
        rate: str = Form("0"),
        krw_price: Optional[str] = Form(None),
    ) -> JSONResponse:
        event_key = require_report(key)
        try:
            settlement_side = SettlementSide.from_str(side)
        except ValueError as error:
            raise HTTPException(status_code=400, detail=str(error)) from error
        workspace.settlements.commit_exchange_rate(event_key, settlement_side, rate, krw_price)
        return JSONResponse(workspace.settlements.compute_summary(event_key).as_dict())

    @app.post("/settlement/{collection}")
    async def add_settlement_item(collection: str, key: str = Form(...)) -> JSONResponse:
        event_key = require_report(key)
        item = workspace.settlements.add_item(event_key, _parse_collection(collection))
        return JSONResponse({"item": item.as_dict() if item else None})

    @app.delete("/settlement/{collection}/{item_id}")
    async def delete_settlement_item(collection: str, item_id: str, key: str) -> JSONResponse:
        event_key = require_report(key)
        deleted = workspace.settlements.delete_item(
            event_key, _parse_collection(collection), item_id
        )
        return JSONResponse({"deleted": deleted})

    @app.post("/settlement/{collection}/{item_id}/stage")
    async def stage_settlement_item(
        collection: str,
        item_id: str,
        key: str = Form(...),
        field: str = Form(...),
        value: str = Form(""),
    ) -> JSONResponse:
        """Keep a keystroke-level edit in memory until the field is committed."""

        event_key = require_report(key)
        staged = workspace.settlements.stage_edit(
            event_key, _parse_collection(collection), item_id, {field: value}
        )
        if not staged:
            raise HTTPException(status_code=404, detail=f"Item {item_id} not found")
        return JSONResponse({"staged": True})

    @app.post("/commit")
    async def commit_edits() -> JSONResponse:
        """Flush staged edits once the edited field loses focus."""

        return JSONResponse({"committed": workspace.commit_edits()})

    @app.get("/profit")
    async def profit_overview() -> JSONResponse:
        return JSONResponse(workspace.profit_overview().as_dict())

    @app.post("/profit/toggle")
    async def toggle_income(key: str = Form(...), enabled: bool = Form(...)) -> JSONResponse:
        if not workspace.profit.set_enabled(EventKey.parse(key), enabled):
            raise HTTPException(status_code=404, detail=f"Profit record {key} not found")
        return JSONResponse(workspace.profit_overview().as_dict())

    @app.post("/profit/override")
    async def override_income(
        key: str = Form(...), amount: Optional[str] = Form(None), stage: bool = Form(False)
    ) -> JSONResponse:
        """Set (or, without an amount, clear) a manual amount for one event."""

        event_key = EventKey.parse(key)
        if stage:
            updated = workspace.profit.stage_override(event_key, amount)
        else:
            updated = workspace.profit.set_override(event_key, amount)
        if not updated:
            raise HTTPException(status_code=404, detail=f"Profit record {key} not found")
        return JSONResponse(workspace.profit_overview().as_dict())

    @app.post("/profit/expenses")
    async def add_expense(label: str = Form(""), amount: str = Form("0")) -> JSONResponse:
        expense = workspace.profit.add_expense(label, amount)
        return JSONResponse({"expense": expense.as_dict()})

    @app.post("/profit/expenses/{expense_id}")
    async def edit_expense(
        expense_id: str,
        label: Optional[str] = Form(None),
        amount: Optional[str] = Form(None),
        stage: bool = Form(False),
    ) -> JSONResponse:
        patch: Dict[str, str] = {}
        if label is not None:
            patch["label"] = label
        if amount is not None:
            patch["amount"] = amount
        if stage:
            updated = workspace.profit.stage_expense_edit(expense_id, patch)
        else:
            updated = workspace.profit.update_expense(expense_id, patch)
        if not updated:
            raise HTTPException(status_code=404, detail=f"Expense {expense_id} not found")
        return JSONResponse({"updated": True})

    @app.delete("/profit/expenses/{expense_id}")
    async def remove_expense(expense_id: str) -> JSONResponse:
        return JSONResponse({"deleted": workspace.profit.remove_expense(expense_id)})

    @app.get("/export/ledger")
    async def export_ledger(month: Optional[str] = None) -> Response:
        return _csv_response(exporter.ledger(month))

    @app.get("/export/settlement")
    async def export_settlement(key: str) -> Response:
        return _csv_response(exporter.settlement(require_report(key)))

    @app.get("/export/profit")
    async def export_profit() -> Response:
        return _csv_response(exporter.profit())

    return app
