"""Mini README: Raw transaction records and the store that owns them.

Structure:
    * Currency - enumeration of the four tracked currencies.
    * CurrencyPair - income/expense amounts for one currency.
    * Entry - immutable transaction record with helpers for (de)serialisation.
    * EntryStore - add/delete/list over the persisted ``entries`` document.
    * sort_for_display - newest-first ordering used by tables and exports.

The store is the single source of truth for raw financial facts. Entries are
never edited in place: they are created by ``add`` and removed by ``delete``
or ``clear``. Every mutation rewrites the whole document.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Tuple

from ..logging_utils import get_logger
from ..storage import ENTRIES_DOCUMENT, DocumentStore
from .coercion import make_id, normalise_date, now_millis, safe_trim, to_float

LOGGER = get_logger(__name__)


class Currency(str, Enum):
    """Currencies recorded on every entry."""

    KRW = "krw"
    BB = "bb"
    KB = "kb"
    USD = "usd"

    @property
    def label(self) -> str:
        return _CURRENCY_LABELS[self]


_CURRENCY_LABELS = {
    Currency.KRW: "KRW",
    Currency.BB: "BB",
    Currency.KB: "KB",
    Currency.USD: "USD",
}

# Bangkok Bank and Kasikorn accounts both hold baht.
BAHT_CURRENCIES: Tuple[Currency, ...] = (Currency.BB, Currency.KB)


@dataclass(frozen=True, slots=True)
class CurrencyPair:
    """Income and expense recorded for one currency."""

    income: float = 0.0
    expense: float = 0.0

    @property
    def net(self) -> float:
        return self.income - self.expense


@dataclass(frozen=True, slots=True)
class Entry:
    """Single transaction with amounts in every tracked currency."""

    id: str
    date: str
    client: str = ""
    event_name: str = ""
    event_detail: str = ""
    memo: str = ""
    created_at: int = 0
    krw: CurrencyPair = field(default_factory=CurrencyPair)
    bb: CurrencyPair = field(default_factory=CurrencyPair)
    kb: CurrencyPair = field(default_factory=CurrencyPair)
    usd: CurrencyPair = field(default_factory=CurrencyPair)

    def amounts(self, currency: Currency) -> CurrencyPair:
        return getattr(self, currency.value)

    @property
    def month(self) -> str:
        return self.date[:7] if len(self.date) >= 7 else ""

    @property
    def has_event(self) -> bool:
        """Only entries naming both an event and a client join a settlement."""

        return bool(self.event_name and self.client)

    def as_dict(self) -> Dict[str, object]:
        """Export the entry with flat, JSON-serialisable values."""

        payload: Dict[str, object] = {
            "id": self.id,
            "date": self.date,
            "client": self.client,
            "event_name": self.event_name,
            "event_detail": self.event_detail,
            "memo": self.memo,
            "created_at": self.created_at,
        }
        for currency in Currency:
            pair = self.amounts(currency)
            payload[f"{currency.value}_income"] = pair.income
            payload[f"{currency.value}_expense"] = pair.expense
        return payload

    @classmethod
    def from_dict(
        cls,
        payload: Mapping[str, Any],
        *,
        id_factory: Callable[[], str] = make_id,
        clock: Callable[[], int] = now_millis,
    ) -> "Entry":
        """Build an entry from stored or submitted values, coercing every field."""

        created_at = payload.get("created_at")
        return cls(
            id=safe_trim(payload.get("id")) or id_factory(),
            date=safe_trim(payload.get("date")),
            client=safe_trim(payload.get("client")),
            event_name=safe_trim(payload.get("event_name")),
            event_detail=safe_trim(payload.get("event_detail")),
            memo=safe_trim(payload.get("memo")),
            created_at=clock() if created_at is None else int(to_float(created_at)),
            **{
                currency.value: CurrencyPair(
                    income=to_float(payload.get(f"{currency.value}_income")),
                    expense=to_float(payload.get(f"{currency.value}_expense")),
                )
                for currency in Currency
            },
        )


def sort_for_display(entries: Iterable[Entry]) -> List[Entry]:
    """Return entries newest date first, ties broken by most recent creation."""

    return sorted(entries, key=lambda entry: (entry.date, entry.created_at), reverse=True)


def parse_entries(payload: object) -> List[Entry]:
    """Coerce a stored ``entries`` document, dropping anything unusable."""

    if not isinstance(payload, list):
        if payload is not None:
            LOGGER.warning("Entries document is not a list; starting empty")
        return []
    entries: List[Entry] = []
    for element in payload:
        if not isinstance(element, Mapping):
            LOGGER.warning("Dropping stored entry that is not an object: %r", element)
            continue
        entry = Entry.from_dict(element)
        if not entry.date:
            LOGGER.warning("Dropping stored entry %s without a date", entry.id)
            continue
        entries.append(entry)
    return entries


class EntryStore:
    """Hold the flat list of entries and write it through on every change."""

    def __init__(
        self,
        store: DocumentStore,
        *,
        clock: Optional[Callable[[], int]] = None,
        id_factory: Optional[Callable[[], str]] = None,
    ) -> None:
        self._store = store
        self._clock = clock or now_millis
        self._id_factory = id_factory or make_id
        self._entries: List[Entry] = parse_entries(store.load(ENTRIES_DOCUMENT))
        LOGGER.debug("Entry store initialised with %s entries", len(self._entries))

    def _persist(self) -> None:
        self._store.save(ENTRIES_DOCUMENT, [entry.as_dict() for entry in self._entries])

    def add(self, draft: Mapping[str, Any]) -> Optional[Entry]:
        """Create an entry from submitted form values.

        Returns ``None`` without touching storage when the date is blank.
        Amount fields that do not parse are stored as zero.
        """

        date = normalise_date(draft.get("date"))
        if not date:
            LOGGER.debug("Rejected entry without a date")
            return None
        values = dict(draft)
        values.update(id=self._id_factory(), date=date, created_at=self._clock())
        entry = Entry.from_dict(values)
        self._entries.insert(0, entry)
        self._persist()
        LOGGER.info("Added entry %s dated %s", entry.id, entry.date)
        return entry

    def delete(self, entry_id: str) -> bool:
        """Remove an entry by id; unknown ids are ignored."""

        remaining = [entry for entry in self._entries if entry.id != entry_id]
        removed = len(remaining) != len(self._entries)
        self._entries = remaining
        self._persist()
        if removed:
            LOGGER.info("Deleted entry %s", entry_id)
        else:
            LOGGER.debug("Delete requested for unknown entry %s", entry_id)
        return removed

    def get(self, entry_id: str) -> Optional[Entry]:
        for entry in self._entries:
            if entry.id == entry_id:
                return entry
        return None

    def list(self) -> List[Entry]:
        """Return every retained entry in storage order (newest additions first)."""

        return list(self._entries)

    def clear(self) -> None:
        self._entries = []
        self._persist()
        LOGGER.info("Cleared all entries")

    def __len__(self) -> int:
        return len(self._entries)
