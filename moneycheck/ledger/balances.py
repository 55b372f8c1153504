"""Mini README: Ledger-wide running balances per currency.

Structure:
    * RunningBalance - post-transaction balance of every currency for one entry.
    * chronological - ascending ``(date, created_at)`` ordering used for replay.
    * running_balance - balance per entry id for a single currency.
    * compute_balances - ``RunningBalance`` per entry id across all currencies.
    * ledger_rows - display-ordered rows paired with their balances.

Balances are always replayed over the full entry set, oldest first. Filtering
by month or event happens afterwards, so a row's balance is the same whether
it is shown on its own month page or in the full ledger.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Sequence

import numpy as np

from .entries import Currency, Entry, sort_for_display


@dataclass(frozen=True, slots=True)
class RunningBalance:
    """Balance of each currency immediately after an entry is applied."""

    krw: float = 0.0
    bb: float = 0.0
    kb: float = 0.0
    usd: float = 0.0

    def of(self, currency: Currency) -> float:
        return getattr(self, currency.value)


@dataclass(frozen=True, slots=True)
class LedgerRow:
    entry: Entry
    balance: RunningBalance


def chronological(entries: Iterable[Entry]) -> List[Entry]:
    """Oldest date first; same-day entries in creation order."""

    return sorted(entries, key=lambda entry: (entry.date, entry.created_at))


def _prefix_sums(ordered: Sequence[Entry], currency: Currency) -> List[float]:
    # cumsum adds sequentially, matching a plain running total exactly.
    nets = np.fromiter(
        (entry.amounts(currency).net for entry in ordered),
        dtype=np.float64,
        count=len(ordered),
    )
    return np.cumsum(nets).tolist()


def running_balance(entries: Iterable[Entry], currency: Currency) -> Dict[str, float]:
    """Map each entry id to its post-transaction balance in ``currency``."""

    ordered = chronological(entries)
    return {entry.id: total for entry, total in zip(ordered, _prefix_sums(ordered, currency))}


def compute_balances(entries: Iterable[Entry]) -> Dict[str, RunningBalance]:
    """Map each entry id to its running balance in every currency."""

    ordered = chronological(entries)
    sums = {currency: _prefix_sums(ordered, currency) for currency in Currency}
    return {
        entry.id: RunningBalance(
            **{currency.value: sums[currency][index] for currency in Currency}
        )
        for index, entry in enumerate(ordered)
    }


def ledger_rows(entries: Sequence[Entry], month: Optional[str] = None) -> List[LedgerRow]:
    """Return rows newest first, optionally limited to one ``YYYY-MM`` month."""

    balances = compute_balances(entries)
    displayed = sort_for_display(entries)
    if month is not None:
        displayed = [entry for entry in displayed if entry.month == month]
    return [
        LedgerRow(entry=entry, balance=balances.get(entry.id, RunningBalance()))
        for entry in displayed
    ]
