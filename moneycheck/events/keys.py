"""Mini README: Event identity and grouping for settlement reports.

Structure:
    * EventKey - normalised ``(month, name)`` identity of one settlement group.
    * EventGroup - a distinct event seen in the ledger with its display name.
    * EventStatus - whether a satellite record still has entries behind it.
    * EventIndex - one-pass index of the ledger by event key.
    * groups_by_month / sorted_months / distinct_events / entries_for_key -
      plain-function views over a list of entries.

An event key is derived, never stored on an entry. The same event name in two
different months yields two keys, so recurring events never merge. Entries
without both an event name and a client stay in the raw ledger but are left
out of every event grouping.
"""

from __future__ import annotations

from collections import OrderedDict
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Iterable, List, Optional, Union

from ..ledger.coercion import safe_trim, year_month
from ..ledger.entries import Entry

KEY_SEPARATOR = "::"
MONTH_WIDTH = len("YYYY-MM")


@dataclass(frozen=True, slots=True, order=True)
class EventKey:
    """Normalised identity shared by every entry of one event in one month."""

    month: str
    name: str

    @classmethod
    def build(cls, event_name: str, date: str) -> "EventKey":
        return cls(month=year_month(safe_trim(date)), name=safe_trim(event_name).lower())

    @classmethod
    def for_entry(cls, entry: Entry) -> "EventKey":
        return cls.build(entry.event_name, entry.date)

    @classmethod
    def parse(cls, text: str) -> "EventKey":
        """Invert ``str(key)``.

        A month is always the seven characters before the first separator.
        A leading separator marks a month-less key whose name contains one.
        """

        if text.startswith(KEY_SEPARATOR):
            return cls(month="", name=text[len(KEY_SEPARATOR):])
        if text[MONTH_WIDTH:MONTH_WIDTH + len(KEY_SEPARATOR)] == KEY_SEPARATOR:
            return cls(month=text[:MONTH_WIDTH], name=text[MONTH_WIDTH + len(KEY_SEPARATOR):])
        return cls(month="", name=text)

    def __str__(self) -> str:
        if self.month:
            return f"{self.month}{KEY_SEPARATOR}{self.name}"
        if KEY_SEPARATOR in self.name:
            return f"{KEY_SEPARATOR}{self.name}"
        return self.name


KeyLike = Union[EventKey, str]


def coerce_key(key: KeyLike) -> EventKey:
    return key if isinstance(key, EventKey) else EventKey.parse(key)


@dataclass(frozen=True, slots=True)
class EventGroup:
    key: EventKey
    display_name: str
    month: str


class EventStatus(str, Enum):
    """Lifecycle of a settlement or profit record relative to the ledger."""

    ACTIVE = "active"
    ORPHANED = "orphaned"
    ABSENT = "absent"


def groups_by_month(entries: Iterable[Entry]) -> Dict[str, List[Entry]]:
    """Partition entries by ``YYYY-MM``; undated-month entries are skipped."""

    groups: Dict[str, List[Entry]] = {}
    for entry in entries:
        month = year_month(entry.date)
        if not month:
            continue
        groups.setdefault(month, []).append(entry)
    return groups


def sorted_months(entries: Iterable[Entry]) -> List[str]:
    """Distinct months present in the ledger, newest first."""

    return sorted(groups_by_month(entries), reverse=True)


def distinct_events(entries: Iterable[Entry]) -> List[EventGroup]:
    """One group per event key; the first entry seen names the group."""

    return EventIndex.from_entries(entries).events()


def entries_for_key(entries: Iterable[Entry], key: KeyLike) -> List[Entry]:
    target = coerce_key(key)
    return [
        entry for entry in entries if entry.has_event and EventKey.for_entry(entry) == target
    ]


class EventIndex:
    """Entries grouped by event key, built once per ledger snapshot."""

    def __init__(self) -> None:
        self._groups: "OrderedDict[EventKey, EventGroup]" = OrderedDict()
        self._entries: Dict[EventKey, List[Entry]] = {}

    @classmethod
    def from_entries(cls, entries: Iterable[Entry]) -> "EventIndex":
        index = cls()
        for entry in entries:
            if not entry.has_event:
                continue
            key = EventKey.for_entry(entry)
            if key not in index._groups:
                index._groups[key] = EventGroup(
                    key=key, display_name=entry.event_name, month=key.month
                )
                index._entries[key] = []
            index._entries[key].append(entry)
        return index

    def events(self) -> List[EventGroup]:
        return list(self._groups.values())

    def group(self, key: KeyLike) -> Optional[EventGroup]:
        return self._groups.get(coerce_key(key))

    def entries_for(self, key: KeyLike) -> List[Entry]:
        return list(self._entries.get(coerce_key(key), []))

    def has_entries(self, key: KeyLike) -> bool:
        return bool(self._entries.get(coerce_key(key)))

    def status(self, key: KeyLike, *, has_record: bool) -> EventStatus:
        """Classify a key given whether a satellite record exists for it."""

        if self.has_entries(key):
            return EventStatus.ACTIVE
        return EventStatus.ORPHANED if has_record else EventStatus.ABSENT

    def __contains__(self, key: object) -> bool:
        if not isinstance(key, (EventKey, str)):
            return False
        return self.has_entries(key)

    def __len__(self) -> int:
        return len(self._groups)
