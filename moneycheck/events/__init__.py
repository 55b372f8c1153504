"""Mini README: Event key derivation and grouping.

Exposes the ``EventKey`` value object used to address settlement reports and
profit records, plus helpers that enumerate the events present in the ledger.
"""

from .keys import (
    EventGroup,
    EventIndex,
    EventKey,
    EventStatus,
    KeyLike,
    coerce_key,
    distinct_events,
    entries_for_key,
    groups_by_month,
    sorted_months,
)

__all__ = [
    "EventGroup",
    "EventIndex",
    "EventKey",
    "EventStatus",
    "KeyLike",
    "coerce_key",
    "distinct_events",
    "entries_for_key",
    "groups_by_month",
    "sorted_months",
]
