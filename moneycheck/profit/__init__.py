"""Mini README: Profit rollup across settlement reports.

``state`` defines the stored per-event flags and manual expenses;
``aggregator`` keeps them in sync with the ledger and produces totals.
"""

from .aggregator import ProfitAggregator
from .state import ProfitExpense, ProfitIncome, ProfitLine, ProfitState, ProfitTotals

__all__ = [
    "ProfitAggregator",
    "ProfitExpense",
    "ProfitIncome",
    "ProfitLine",
    "ProfitState",
    "ProfitTotals",
]
