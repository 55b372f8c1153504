"""Mini README: Per-event settlement computation and report editing.

Structure:
    * SettlementAggregator - owns the ``settlement_reports`` document and
      combines it with ledger entries into ``SettlementSummary`` values.

Totals are driven by the Baht figures: fixed Baht prices, Bangkok Bank and
Kasikorn amounts from the entries, and additional items. KRW sums never enter
the totals; they only seed the displayed KRW fixed price until the user
confirms one. The guide sub-ledger is reported next to the totals and never
folded into them.

Edits to item tables follow a two-phase pattern: ``stage_edit`` changes the
in-memory report so summaries reflect it immediately, and ``commit_edit``
writes the document. Anything staged but not committed is lost on reload.
"""

from __future__ import annotations

from typing import Any, Callable, Dict, List, Mapping, Optional

from ..events import EventIndex, EventKey, EventStatus, KeyLike, coerce_key
from ..ledger.coercion import make_id, to_float
from ..ledger.entries import BAHT_CURRENCIES, EntryStore
from ..logging_utils import get_logger
from ..storage import SETTLEMENT_DOCUMENT, DocumentStore
from .reports import (
    AdditionalItem,
    GuideOption,
    GuideSummary,
    ItemCollection,
    ReportItem,
    SettlementReport,
    SettlementRow,
    SettlementSide,
    SettlementSummary,
    apply_item_fields,
    parse_report_map,
)

LOGGER = get_logger(__name__)


class SettlementAggregator:
    """Manage settlement reports keyed by event and compute their totals."""

    def __init__(
        self,
        store: DocumentStore,
        entries: EntryStore,
        *,
        id_factory: Optional[Callable[[], str]] = None,
    ) -> None:
        self._store = store
        self._entries = entries
        self._id_factory = id_factory or make_id
        self._reports: Dict[EventKey, SettlementReport] = parse_report_map(
            store.load(SETTLEMENT_DOCUMENT)
        )
        self._dirty = False
        LOGGER.debug("Settlement aggregator initialised with %s reports", len(self._reports))

    def _persist(self) -> None:
        self._store.save(
            SETTLEMENT_DOCUMENT,
            {str(key): report.as_dict() for key, report in self._reports.items()},
        )
        self._dirty = False

    def _index(self, index: Optional[EventIndex]) -> EventIndex:
        return index if index is not None else EventIndex.from_entries(self._entries.list())

    # -- report lifecycle -------------------------------------------------

    def report(self, key: KeyLike) -> Optional[SettlementReport]:
        return self._reports.get(coerce_key(key))

    def reports(self) -> Dict[EventKey, SettlementReport]:
        return dict(self._reports)

    def status(self, key: KeyLike, index: Optional[EventIndex] = None) -> EventStatus:
        return self._index(index).status(key, has_record=self.report(key) is not None)

    def ensure_defaults(self, key: KeyLike, name: str) -> SettlementReport:
        """Create a zero-valued report for ``key`` unless one already exists."""

        event_key = coerce_key(key)
        report = self._reports.get(event_key)
        if report is None:
            report = SettlementReport(event_name=name)
            self._reports[event_key] = report
            self._persist()
            LOGGER.info("Created settlement report %s", event_key)
        return report

    def update_field(self, key: KeyLike, patch: Mapping[str, Any]) -> bool:
        """Merge ``patch`` into the report; unknown keys are a no-op."""

        report = self.report(key)
        if report is None:
            LOGGER.debug("Ignoring update for unknown settlement %s", key)
            return False
        applied = report.apply(patch)
        self._persist()
        LOGGER.info("Updated settlement %s fields %s", key, ", ".join(applied) or "(none)")
        return True

    def commit_exchange_rate(
        self,
        key: KeyLike,
        side: SettlementSide,
        rate: object,
        krw_price: Optional[object] = None,
    ) -> bool:
        """Store an exchange rate and, when possible, the Baht price it implies.

        The KRW price defaults to the displayed value (override or ledger sum).
        When both the rate and that price are positive, the Baht fixed price is
        set to ``krw_price * rate`` in the same write as the rate.
        """

        report = self.report(key)
        if report is None:
            LOGGER.debug("Ignoring exchange rate for unknown settlement %s", key)
            return False
        rate_value = to_float(rate)
        if krw_price is None:
            summary = self.compute_summary(key)
            krw_value = (
                summary.displayed_krw_income
                if side is SettlementSide.INCOME
                else summary.displayed_krw_expense
            )
        else:
            krw_value = to_float(krw_price)
        patch: Dict[str, float] = {f"baht_exchange_rate_{side.value}": rate_value}
        if rate_value > 0 and krw_value > 0:
            patch[f"fixed_price_baht_{side.value}"] = krw_value * rate_value
        return self.update_field(key, patch)

    def clear(self) -> None:
        self._reports = {}
        self._persist()
        LOGGER.info("Cleared all settlement reports")

    # -- computation ------------------------------------------------------

    def compute_summary(
        self, key: KeyLike, index: Optional[EventIndex] = None
    ) -> SettlementSummary:
        """Combine the event's entries with its report into totals.

        Unknown keys produce an all-zero summary rather than an error.
        """

        event_key = coerce_key(key)
        event_index = self._index(index)
        entries = event_index.entries_for(event_key)
        report = self._reports.get(event_key) or SettlementReport()

        krw_income_sum = sum(entry.krw.income for entry in entries)
        krw_expense_sum = sum(entry.krw.expense for entry in entries)
        baht_income = sum(
            entry.amounts(currency).income for entry in entries for currency in BAHT_CURRENCIES
        )
        baht_expense = sum(
            entry.amounts(currency).expense for entry in entries for currency in BAHT_CURRENCIES
        )
        additional_income = sum(item.income for item in report.additional_items)
        additional_expense = sum(item.expense for item in report.additional_items)

        total_income = report.fixed_price_baht_income + baht_income + additional_income
        total_expense = report.fixed_price_baht_expense + baht_expense + additional_expense

        displayed_krw_income = _displayed_krw(report.fixed_price_krw_income, krw_income_sum)
        displayed_krw_expense = _displayed_krw(report.fixed_price_krw_expense, krw_expense_sum)

        group = event_index.group(event_key)
        return SettlementSummary(
            key=event_key,
            event_name=group.display_name if group else report.event_name,
            status=event_index.status(event_key, has_record=event_key in self._reports),
            entry_count=len(entries),
            krw_income_sum=krw_income_sum,
            krw_expense_sum=krw_expense_sum,
            baht_income_from_entries=baht_income,
            baht_expense_from_entries=baht_expense,
            baht_fixed_income=report.fixed_price_baht_income,
            baht_fixed_expense=report.fixed_price_baht_expense,
            additional_income=additional_income,
            additional_expense=additional_expense,
            total_income=total_income,
            total_expense=total_expense,
            total_profit=total_income - total_expense,
            displayed_krw_income=displayed_krw_income,
            displayed_krw_expense=displayed_krw_expense,
            displayed_baht_income=_displayed_baht(
                report.fixed_price_baht_income,
                displayed_krw_income,
                report.baht_exchange_rate_income,
            ),
            displayed_baht_expense=_displayed_baht(
                report.fixed_price_baht_expense,
                displayed_krw_expense,
                report.baht_exchange_rate_expense,
            ),
            guide=GuideSummary.of(report),
        )

    def settlement_rows(
        self,
        key: KeyLike,
        index: Optional[EventIndex] = None,
        *,
        displayed: bool = True,
    ) -> List[SettlementRow]:
        """Event entries oldest first with their per-row Baht income and expense.

        Each row carries a Baht fixed price plus that entry's Bangkok Bank and
        Kasikorn amounts. The detail view uses the displayed price (which
        falls back to KRW times the rate); exports pass ``displayed=False``
        to use only the stored price.
        """

        event_index = self._index(index)
        if displayed:
            summary = self.compute_summary(key, event_index)
            income_price = summary.displayed_baht_income
            expense_price = summary.displayed_baht_expense
        else:
            report = self.report(key) or SettlementReport()
            income_price = report.fixed_price_baht_income
            expense_price = report.fixed_price_baht_expense
        entries = sorted(event_index.entries_for(key), key=lambda entry: entry.date)
        return [
            SettlementRow(
                entry=entry,
                income=income_price
                + sum(entry.amounts(currency).income for currency in BAHT_CURRENCIES),
                expense=expense_price
                + sum(entry.amounts(currency).expense for currency in BAHT_CURRENCIES),
            )
            for entry in entries
        ]

    # -- item tables ------------------------------------------------------

    def add_item(self, key: KeyLike, collection: ItemCollection) -> Optional[ReportItem]:
        """Append a zeroed item to one of the report's lists."""

        report = self.report(key)
        if report is None:
            LOGGER.debug("Cannot add %s to unknown settlement %s", collection.value, key)
            return None
        item: ReportItem
        if collection is ItemCollection.ADDITIONAL_ITEMS:
            item = AdditionalItem(id=self._id_factory())
        else:
            item = GuideOption(id=self._id_factory())
        report.items(collection).append(item)
        self._persist()
        LOGGER.info("Added %s %s to settlement %s", collection.value, item.id, key)
        return item

    def add_additional_item(self, key: KeyLike) -> Optional[AdditionalItem]:
        return self.add_item(key, ItemCollection.ADDITIONAL_ITEMS)  # type: ignore[return-value]

    def add_guide_option(self, key: KeyLike) -> Optional[GuideOption]:
        return self.add_item(key, ItemCollection.GUIDE_OPTIONS)  # type: ignore[return-value]

    def delete_item(self, key: KeyLike, collection: ItemCollection, item_id: str) -> bool:
        report = self.report(key)
        if report is None:
            return False
        items = report.items(collection)
        remaining = [item for item in items if item.id != item_id]
        if len(remaining) == len(items):
            LOGGER.debug("No %s %s in settlement %s", collection.value, item_id, key)
            return False
        items[:] = remaining
        self._persist()
        LOGGER.info("Deleted %s %s from settlement %s", collection.value, item_id, key)
        return True

    def _find_item(
        self, key: KeyLike, collection: ItemCollection, item_id: str
    ) -> Optional[ReportItem]:
        report = self.report(key)
        if report is None:
            return None
        for item in report.items(collection):
            if item.id == item_id:
                return item
        return None

    def stage_edit(
        self,
        key: KeyLike,
        collection: ItemCollection,
        item_id: str,
        fields: Mapping[str, Any],
    ) -> bool:
        """Apply an in-progress edit in memory without writing the document."""

        item = self._find_item(key, collection, item_id)
        if item is None:
            LOGGER.debug("Staged edit for unknown %s %s ignored", collection.value, item_id)
            return False
        if apply_item_fields(item, fields):
            self._dirty = True
        return True

    def commit_edit(self) -> bool:
        """Persist staged edits; returns ``False`` when nothing was pending."""

        if not self._dirty:
            return False
        self._persist()
        LOGGER.info("Committed staged settlement edits")
        return True

    @property
    def has_pending_edits(self) -> bool:
        return self._dirty

    def update_item(
        self,
        key: KeyLike,
        collection: ItemCollection,
        item_id: str,
        fields: Mapping[str, Any],
    ) -> bool:
        """Stage and commit an item edit in one step."""

        if not self.stage_edit(key, collection, item_id, fields):
            return False
        self.commit_edit()
        return True


def _displayed_krw(override: Optional[float], ledger_sum: float) -> float:
    return ledger_sum if override is None else override


def _displayed_baht(stored: float, displayed_krw: float, rate: float) -> float:
    if stored == 0 and rate > 0:
        return displayed_krw * rate
    return stored

