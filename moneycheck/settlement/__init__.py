"""Mini README: Settlement reports grouped by event.

``reports`` defines the stored overlay (fixed prices, rates, extra lines, the
guide sub-ledger) and the computed summaries; ``aggregator`` owns the document
and performs the arithmetic.
"""

from .aggregator import SettlementAggregator
from .reports import (
    AdditionalItem,
    GuideOption,
    GuideSummary,
    ItemCollection,
    SettlementReport,
    SettlementRow,
    SettlementSide,
    SettlementSummary,
    parse_report_map,
)

__all__ = [
    "AdditionalItem",
    "GuideOption",
    "GuideSummary",
    "ItemCollection",
    "SettlementAggregator",
    "SettlementReport",
    "SettlementRow",
    "SettlementSide",
    "SettlementSummary",
    "parse_report_map",
]
