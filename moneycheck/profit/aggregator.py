"""Mini README: Period profit rollup across settlements.

Structure:
    * ProfitAggregator - owns the ``profit_state`` document, keeps one income
      record per event key and totals enabled settlements against manual
      expenses.

Records are created lazily by ``sync`` and are never removed when their
entries disappear. Such orphaned records stay in storage but contribute
nothing to the totals. Manual amounts override the computed settlement profit
for a single event; ``None`` restores the computed value.

Staged overrides and expense edits sit in an overlay on top of the committed
state. Totals read through the overlay, but only ``commit_edit`` folds it into
the document, so other writes (syncing, toggles, new expenses) never persist a
half-typed value.
"""

from __future__ import annotations

from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional

from ..events import EventGroup, EventIndex, EventKey, KeyLike, coerce_key
from ..ledger.coercion import make_id, to_float, to_optional_float
from ..ledger.entries import EntryStore
from ..logging_utils import get_logger
from ..settlement import SettlementAggregator
from ..storage import PROFIT_DOCUMENT, DocumentStore
from .state import ProfitExpense, ProfitIncome, ProfitLine, ProfitState, ProfitTotals

LOGGER = get_logger(__name__)


class ProfitAggregator:
    """Combine settlement profits and manual expenses into one period figure."""

    def __init__(
        self,
        store: DocumentStore,
        entries: EntryStore,
        settlements: SettlementAggregator,
        *,
        id_factory: Optional[Callable[[], str]] = None,
    ) -> None:
        self._store = store
        self._entries = entries
        self._settlements = settlements
        self._id_factory = id_factory or make_id
        self._state = ProfitState.from_payload(store.load(PROFIT_DOCUMENT))
        self._staged_overrides: Dict[EventKey, Optional[float]] = {}
        self._staged_expenses: Dict[str, Dict[str, Any]] = {}
        LOGGER.debug(
            "Profit aggregator initialised with %s incomes and %s expenses",
            len(self._state.incomes),
            len(self._state.expenses),
        )

    @property
    def state(self) -> ProfitState:
        """The committed state, without staged edits."""

        return self._state

    def _persist(self) -> None:
        self._store.save(PROFIT_DOCUMENT, self._state.as_dict())

    def income(self, key: KeyLike) -> Optional[ProfitIncome]:
        return self._state.incomes.get(coerce_key(key))

    def sync(self, events: Optional[Iterable[EventGroup]] = None) -> int:
        """Ensure an income record exists for every event; returns how many were created.

        The document is only written when a record was created or refreshed.
        """

        if events is None:
            events = EventIndex.from_entries(self._entries.list()).events()
        created = 0
        refreshed = 0
        for event in events:
            record = self._state.incomes.get(event.key)
            if record is None:
                self._state.incomes[event.key] = ProfitIncome(
                    event_name=event.display_name, month=event.month
                )
                created += 1
            elif record.month != event.month or record.event_name != event.display_name:
                record.month = event.month
                record.event_name = event.display_name
                refreshed += 1
        if created or refreshed:
            self._persist()
        if created:
            LOGGER.info("Registered %s new events for profit rollup", created)
        return created

    def _override_for(self, key: EventKey, record: ProfitIncome) -> Optional[float]:
        if key in self._staged_overrides:
            return self._staged_overrides[key]
        return record.amount_override

    def _expenses(self) -> List[ProfitExpense]:
        """Expenses as currently edited, staged values applied."""

        expenses = []
        for expense in self._state.expenses:
            staged = self._staged_expenses.get(expense.id, {})
            expenses.append(
                ProfitExpense(
                    id=expense.id,
                    label=staged.get("label", expense.label),
                    amount=staged.get("amount", expense.amount),
                )
            )
        return expenses

    def lines(self, index: Optional[EventIndex] = None) -> List[ProfitLine]:
        """Every stored income record, newest month first, with its status."""

        event_index = index if index is not None else EventIndex.from_entries(self._entries.list())
        lines = [
            ProfitLine(
                key=key,
                event_name=record.event_name,
                month=record.month,
                enabled=record.enabled,
                status=event_index.status(key, has_record=True),
                computed_profit=self._settlements.compute_summary(key, event_index).total_profit,
                amount_override=self._override_for(key, record),
            )
            for key, record in self._state.incomes.items()
        ]
        return sorted(lines, key=lambda line: line.month, reverse=True)

    def compute_total(self, index: Optional[EventIndex] = None) -> ProfitTotals:
        """Sum enabled, still-active settlements and subtract manual expenses."""

        lines = self.lines(index)
        expenses = self._expenses()
        total_income = sum(line.amount for line in lines if line.counted)
        total_expense = sum(expense.amount for expense in expenses)
        return ProfitTotals(
            total_income=total_income,
            total_expense=total_expense,
            lines=lines,
            expenses=expenses,
        )

    def set_enabled(self, key: KeyLike, enabled: bool) -> bool:
        record = self.income(key)
        if record is None:
            LOGGER.debug("Toggle ignored for unknown profit record %s", key)
            return False
        record.enabled = bool(enabled)
        self._persist()
        LOGGER.info("Profit record %s enabled=%s", key, record.enabled)
        return True

    def stage_override(self, key: KeyLike, amount: object) -> bool:
        """Hold a manual amount in memory until ``commit_edit``."""

        event_key = coerce_key(key)
        if event_key not in self._state.incomes:
            return False
        self._staged_overrides[event_key] = to_optional_float(amount)
        LOGGER.debug("Staged override %s for %s", self._staged_overrides[event_key], key)
        return True

    def set_override(self, key: KeyLike, amount: object) -> bool:
        """Replace the computed profit of one event; ``None`` clears the override."""

        if not self.stage_override(key, amount):
            LOGGER.debug("Override ignored for unknown profit record %s", key)
            return False
        self.commit_edit()
        return True

    def add_expense(self, label: str = "", amount: object = 0) -> ProfitExpense:
        expense = ProfitExpense(id=self._id_factory(), label=str(label), amount=to_float(amount))
        self._state.expenses.append(expense)
        self._persist()
        LOGGER.info("Added profit expense %s", expense.id)
        return expense

    def remove_expense(self, expense_id: str) -> bool:
        remaining = [expense for expense in self._state.expenses if expense.id != expense_id]
        if len(remaining) == len(self._state.expenses):
            LOGGER.debug("No profit expense %s to remove", expense_id)
            return False
        self._state.expenses = remaining
        self._staged_expenses.pop(expense_id, None)
        self._persist()
        LOGGER.info("Removed profit expense %s", expense_id)
        return True

    def stage_expense_edit(self, expense_id: str, patch: Mapping[str, Any]) -> bool:
        """Hold label/amount edits in memory until ``commit_edit``."""

        if not any(expense.id == expense_id for expense in self._state.expenses):
            return False
        staged: Dict[str, Any] = {}
        for name, value in patch.items():
            if name == "label":
                staged["label"] = "" if value is None else str(value)
            elif name == "amount":
                staged["amount"] = to_float(value)
            else:
                LOGGER.warning("Ignoring unknown expense field %s", name)
        if staged:
            self._staged_expenses.setdefault(expense_id, {}).update(staged)
        return True

    def update_expense(self, expense_id: str, patch: Mapping[str, Any]) -> bool:
        if not self.stage_expense_edit(expense_id, patch):
            LOGGER.debug("Update ignored for unknown profit expense %s", expense_id)
            return False
        self.commit_edit()
        return True

    def commit_edit(self) -> bool:
        """Fold staged overrides and expense edits into the document and persist it."""

        if not self.has_pending_edits:
            return False
        for key, amount in self._staged_overrides.items():
            record = self._state.incomes.get(key)
            if record is not None:
                record.amount_override = amount
        self._state.expenses = self._expenses()
        self._staged_overrides = {}
        self._staged_expenses = {}
        self._persist()
        LOGGER.info("Committed staged profit edits")
        return True

    @property
    def has_pending_edits(self) -> bool:
        return bool(self._staged_overrides or self._staged_expenses)

    def clear(self) -> None:
        self._state = ProfitState()
        self._staged_overrides = {}
        self._staged_expenses = {}
        self._persist()
        LOGGER.info("Cleared profit state")
