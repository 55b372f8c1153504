"""Mini README: One object wiring the ledger, settlement and profit stores.

Structure:
    * LedgerWorkspace - owns a document store and the three aggregates built
      on top of it, plus the cross-store operations collaborators call.

The workspace is what the HTTP interface and the CLI talk to. Adding an entry
and creating its settlement report are two separate writes to two documents;
if the second one fails the entry exists without a report, which
``ensure_reports`` repairs.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Callable, List, Mapping, Optional, Union

from .configuration import MoneyCheckSettings
from .events import EventGroup, EventIndex, EventKey, sorted_months
from .ledger import Entry, EntryStore, LedgerRow, ledger_rows
from .logging_utils import get_logger
from .profit import ProfitAggregator, ProfitTotals
from .settlement import SettlementAggregator
from .storage import DocumentStore, JsonFileDocumentStore

LOGGER = get_logger(__name__)


class LedgerWorkspace:
    """Entry point for every mutation and query a collaborator needs."""

    def __init__(
        self,
        store: DocumentStore,
        *,
        clock: Optional[Callable[[], int]] = None,
        id_factory: Optional[Callable[[], str]] = None,
    ) -> None:
        self.store = store
        self.entries = EntryStore(store, clock=clock, id_factory=id_factory)
        self.settlements = SettlementAggregator(store, self.entries, id_factory=id_factory)
        self.profit = ProfitAggregator(
            store, self.entries, self.settlements, id_factory=id_factory
        )

    @classmethod
    def open(cls, directory: Union[str, Path]) -> "LedgerWorkspace":
        return cls(JsonFileDocumentStore(directory))

    @classmethod
    def from_settings(cls, settings: MoneyCheckSettings) -> "LedgerWorkspace":
        LOGGER.info("Opening ledger documents in %s", settings.data_directory)
        return cls.open(settings.data_directory)

    def index(self) -> EventIndex:
        return EventIndex.from_entries(self.entries.list())

    def add_entry(self, draft: Mapping[str, Any]) -> Optional[Entry]:
        """Record an entry and make sure its settlement report exists."""

        entry = self.entries.add(draft)
        if entry is not None and entry.has_event:
            self.settlements.ensure_defaults(EventKey.for_entry(entry), entry.event_name)
        return entry

    def delete_entry(self, entry_id: str) -> bool:
        return self.entries.delete(entry_id)

    def ensure_reports(self) -> int:
        """Create any settlement report missing for an event in the ledger."""

        created = 0
        for event in self.events():
            if self.settlements.report(event.key) is None:
                self.settlements.ensure_defaults(event.key, event.display_name)
                created += 1
        return created

    def events(self) -> List[EventGroup]:
        return self.index().events()

    def months(self) -> List[str]:
        return sorted_months(self.entries.list())

    def ledger(self, month: Optional[str] = None) -> List[LedgerRow]:
        return ledger_rows(self.entries.list(), month)

    def profit_overview(self) -> ProfitTotals:
        """Register new events with the profit rollup, then total it."""

        index = self.index()
        self.profit.sync(index.events())
        return self.profit.compute_total(index)

    def commit_edits(self) -> bool:
        """Flush staged edits of both satellite documents."""

        settlement_written = self.settlements.commit_edit()
        profit_written = self.profit.commit_edit()
        return settlement_written or profit_written

    def reset_all(self) -> None:
        """Delete every entry, report and profit record."""

        self.entries.clear()
        self.settlements.clear()
        self.profit.clear()
        LOGGER.info("Ledger workspace reset")
