"""Mini README: Raw ledger entries and running balances.

``entries`` owns the transaction records and their persistence while
``balances`` replays them chronologically to produce per-currency running
totals. ``coercion`` holds the lenient parsers both rely on.
"""

from .balances import (
    LedgerRow,
    RunningBalance,
    chronological,
    compute_balances,
    ledger_rows,
    running_balance,
)
from .entries import (
    BAHT_CURRENCIES,
    Currency,
    CurrencyPair,
    Entry,
    EntryStore,
    parse_entries,
    sort_for_display,
)

__all__ = [
    "BAHT_CURRENCIES",
    "Currency",
    "CurrencyPair",
    "Entry",
    "EntryStore",
    "LedgerRow",
    "RunningBalance",
    "chronological",
    "compute_balances",
    "ledger_rows",
    "parse_entries",
    "running_balance",
    "sort_for_display",
]
