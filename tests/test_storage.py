"""Mini README: Tests for the JSON document store and configuration.

Structure:
    * full workspace round trip through JSON files on disk.
    * unreadable documents load as empty.
    * settings read from ``MONEYCHECK_`` environment variables.
"""

from __future__ import annotations

from moneycheck.configuration import MoneyCheckSettings
from moneycheck.events import EventKey
from moneycheck.settlement import ItemCollection
from moneycheck.storage import ENTRIES_DOCUMENT, JsonFileDocumentStore
from moneycheck.workspace import LedgerWorkspace


def test_workspace_round_trips_through_json_files(tmp_path, clock, id_factory, make_draft) -> None:
    """Reopening the directory restores entries, reports and profit state."""

    workspace = LedgerWorkspace(JsonFileDocumentStore(tmp_path), clock=clock, id_factory=id_factory)
    workspace.add_entry(
        make_draft("2025-09-01", event_name="Temple Walk", client="Yoon", krw_income=1200, memo='say "hi"')
    )
    key = EventKey(month="2025-09", name="temple walk")
    workspace.settlements.update_field(key, {"fixed_price_krw_income": 1000, "tour_fee": 15})
    item = workspace.settlements.add_guide_option(key)
    workspace.settlements.update_item(
        key, ItemCollection.GUIDE_OPTIONS, item.id, {"option_name": "Tea", "sale_price": 9}
    )
    workspace.profit.add_expense("Tickets", 4.5)
    workspace.profit_overview()
    workspace.profit.set_override(key, 77)

    reopened = LedgerWorkspace.open(tmp_path)

    assert reopened.entries.list() == workspace.entries.list()
    assert reopened.settlements.reports() == workspace.settlements.reports()
    assert reopened.profit.state == workspace.profit.state
    assert not list(tmp_path.glob("*.tmp"))


def test_corrupt_document_loads_as_empty(tmp_path) -> None:
    store = JsonFileDocumentStore(tmp_path)
    store.path_for(ENTRIES_DOCUMENT).write_text("{ not json", encoding="utf-8")

    workspace = LedgerWorkspace(store)

    assert workspace.entries.list() == []


def test_delete_removes_the_file(tmp_path) -> None:
    store = JsonFileDocumentStore(tmp_path)
    store.save("scratch", {"a": 1})

    assert store.load("scratch") == {"a": 1}
    store.delete("scratch")
    store.delete("scratch")
    assert store.load("scratch") is None


def test_settings_read_prefixed_environment(monkeypatch, tmp_path) -> None:
    monkeypatch.setenv("MONEYCHECK_DATA_DIRECTORY", str(tmp_path / "docs"))
    monkeypatch.setenv("MONEYCHECK_INTERFACE_PORT", "9100")
    monkeypatch.setenv("MONEYCHECK_LOG_LEVEL", "debug")

    settings = MoneyCheckSettings()

    assert settings.data_directory == (tmp_path / "docs").resolve()
    assert settings.data_directory.is_dir()
    assert settings.interface_port == 9100
    assert settings.log_level == "DEBUG"
    assert settings.resolved_export_directory == settings.data_directory / "exports"
