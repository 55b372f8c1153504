"""Mini README: Settlement report records and their derived summaries.

Structure:
    * SettlementSide - income versus expense half of a report.
    * ItemCollection - the two editable item lists carried by a report.
    * AdditionalItem / GuideOption - ad-hoc line items and guide options.
    * SettlementReport - manually curated overlay for one event key.
    * GuideSummary / SettlementSummary / SettlementRow - computed read models.
    * parse_report_map - defensive loader for the ``settlement_reports`` document.

The KRW fixed prices are optional overrides. ``None`` means "show the ledger
sum instead". Older documents stored ``0`` for the same meaning, so a stored
zero loads as ``None`` and committing zero clears the override.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Union

from ..events import EventKey, EventStatus
from ..ledger.coercion import make_id, safe_trim, to_float
from ..ledger.entries import Entry
from ..logging_utils import get_logger

LOGGER = get_logger(__name__)


class SettlementSide(str, Enum):
    INCOME = "income"
    EXPENSE = "expense"

    @classmethod
    def from_str(cls, value: str) -> "SettlementSide":
        try:
            return cls(value.strip().lower())
        except (ValueError, AttributeError) as error:
            raise ValueError(f"Unsupported settlement side: {value}") from error


class ItemCollection(str, Enum):
    ADDITIONAL_ITEMS = "additional_items"
    GUIDE_OPTIONS = "guide_options"

    @classmethod
    def from_str(cls, value: str) -> "ItemCollection":
        try:
            return cls(value.strip().lower().replace("-", "_"))
        except (ValueError, AttributeError) as error:
            raise ValueError(f"Unsupported item collection: {value}") from error


OPTIONAL_PRICE_FIELDS = frozenset({"fixed_price_krw_income", "fixed_price_krw_expense"})
RATE_AND_BAHT_FIELDS = frozenset(
    {
        "baht_exchange_rate_income",
        "fixed_price_baht_income",
        "baht_exchange_rate_expense",
        "fixed_price_baht_expense",
    }
)
GUIDE_INCOME_FIELDS = ("tour_fee", "option_sales", "other_income")
GUIDE_EXPENSE_FIELDS = (
    "event_cost",
    "option_cost",
    "guide_daily_fee",
    "guide_commission",
    "other_payment",
)
NUMERIC_FIELDS = RATE_AND_BAHT_FIELDS | set(GUIDE_INCOME_FIELDS) | set(GUIDE_EXPENSE_FIELDS)
TEXT_FIELDS = frozenset({"event_name"})
EDITABLE_FIELDS = OPTIONAL_PRICE_FIELDS | NUMERIC_FIELDS | TEXT_FIELDS


def _override(value: object) -> Optional[float]:
    if value is None:
        return None
    number = to_float(value)
    return number if number != 0 else None


@dataclass(slots=True)
class AdditionalItem:
    id: str
    name: str = ""
    income: float = 0.0
    expense: float = 0.0

    TEXT_FIELDS = ("name",)
    NUMERIC_FIELDS = ("income", "expense")

    def as_dict(self) -> Dict[str, object]:
        return {"id": self.id, "name": self.name, "income": self.income, "expense": self.expense}

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "AdditionalItem":
        return cls(
            id=safe_trim(payload.get("id")) or make_id(),
            name=str(payload.get("name") or ""),
            income=to_float(payload.get("income")),
            expense=to_float(payload.get("expense")),
        )


@dataclass(slots=True)
class GuideOption:
    id: str
    option_name: str = ""
    sale_price: float = 0.0
    cost_price: float = 0.0
    vendor: str = ""

    TEXT_FIELDS = ("option_name", "vendor")
    NUMERIC_FIELDS = ("sale_price", "cost_price")

    @property
    def profit(self) -> float:
        return self.sale_price - self.cost_price

    def as_dict(self) -> Dict[str, object]:
        return {
            "id": self.id,
            "option_name": self.option_name,
            "sale_price": self.sale_price,
            "cost_price": self.cost_price,
            "vendor": self.vendor,
        }

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "GuideOption":
        return cls(
            id=safe_trim(payload.get("id")) or make_id(),
            option_name=str(payload.get("option_name") or ""),
            sale_price=to_float(payload.get("sale_price")),
            cost_price=to_float(payload.get("cost_price")),
            vendor=str(payload.get("vendor") or ""),
        )


ReportItem = Union[AdditionalItem, GuideOption]


def apply_item_fields(item: ReportItem, fields: Mapping[str, Any]) -> List[str]:
    """Write coerced values onto ``item`` and return the names that were applied."""

    applied: List[str] = []
    for name, value in fields.items():
        if name in item.TEXT_FIELDS:
            setattr(item, name, "" if value is None else str(value))
        elif name in item.NUMERIC_FIELDS:
            setattr(item, name, to_float(value))
        else:
            LOGGER.warning("Ignoring unknown field %s for %s", name, type(item).__name__)
            continue
        applied.append(name)
    return applied


@dataclass(slots=True)
class SettlementReport:
    """Fixed prices, exchange rates, extra lines and the guide sub-ledger for one event."""

    event_name: str = ""
    fixed_price_krw_income: Optional[float] = None
    baht_exchange_rate_income: float = 0.0
    fixed_price_baht_income: float = 0.0
    fixed_price_krw_expense: Optional[float] = None
    baht_exchange_rate_expense: float = 0.0
    fixed_price_baht_expense: float = 0.0
    additional_items: List[AdditionalItem] = field(default_factory=list)
    tour_fee: float = 0.0
    option_sales: float = 0.0
    other_income: float = 0.0
    event_cost: float = 0.0
    option_cost: float = 0.0
    guide_daily_fee: float = 0.0
    guide_commission: float = 0.0
    other_payment: float = 0.0
    guide_options: List[GuideOption] = field(default_factory=list)

    def fixed_price_krw(self, side: SettlementSide) -> Optional[float]:
        return getattr(self, f"fixed_price_krw_{side.value}")

    def exchange_rate(self, side: SettlementSide) -> float:
        return getattr(self, f"baht_exchange_rate_{side.value}")

    def fixed_price_baht(self, side: SettlementSide) -> float:
        return getattr(self, f"fixed_price_baht_{side.value}")

    def items(self, collection: ItemCollection) -> List[ReportItem]:
        return getattr(self, collection.value)

    def apply(self, patch: Mapping[str, Any]) -> List[str]:
        """Merge a partial update, returning the field names that were applied."""

        applied: List[str] = []
        for name, value in patch.items():
            if name in OPTIONAL_PRICE_FIELDS:
                setattr(self, name, _override(value))
            elif name in NUMERIC_FIELDS:
                setattr(self, name, to_float(value))
            elif name in TEXT_FIELDS:
                setattr(self, name, safe_trim(value))
            else:
                LOGGER.warning("Ignoring unknown settlement field %s", name)
                continue
            applied.append(name)
        return applied

    def as_dict(self) -> Dict[str, object]:
        payload: Dict[str, object] = {
            name: getattr(self, name)
            for name in ("event_name", *sorted(OPTIONAL_PRICE_FIELDS | NUMERIC_FIELDS))
        }
        payload["additional_items"] = [item.as_dict() for item in self.additional_items]
        payload["guide_options"] = [option.as_dict() for option in self.guide_options]
        return payload

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "SettlementReport":
        report = cls()
        report.apply(
            {name: value for name, value in payload.items() if name in EDITABLE_FIELDS}
        )
        report.additional_items = _parse_items(payload.get("additional_items"), AdditionalItem)
        report.guide_options = _parse_items(payload.get("guide_options"), GuideOption)
        return report


def _parse_items(payload: object, item_type: Any) -> List[Any]:
    if not isinstance(payload, list):
        return []
    return [item_type.from_dict(element) for element in payload if isinstance(element, Mapping)]


def parse_report_map(payload: object) -> Dict[EventKey, SettlementReport]:
    """Coerce a stored report map; non-object roots and values are dropped."""

    if not isinstance(payload, Mapping):
        if payload is not None:
            LOGGER.warning("Settlement document is not an object; starting empty")
        return {}
    reports: Dict[EventKey, SettlementReport] = {}
    for key_text, value in payload.items():
        if not isinstance(value, Mapping):
            LOGGER.warning("Dropping settlement report %s that is not an object", key_text)
            continue
        reports[EventKey.parse(str(key_text))] = SettlementReport.from_dict(value)
    return reports


@dataclass(frozen=True, slots=True)
class GuideSummary:
    income: float = 0.0
    expense: float = 0.0

    @property
    def profit(self) -> float:
        return self.income - self.expense

    @classmethod
    def of(cls, report: SettlementReport) -> "GuideSummary":
        return cls(
            income=sum(getattr(report, name) for name in GUIDE_INCOME_FIELDS),
            expense=sum(getattr(report, name) for name in GUIDE_EXPENSE_FIELDS),
        )


@dataclass(frozen=True, slots=True)
class SettlementSummary:
    """Totals for one event key plus the values a form should display."""

    key: EventKey
    event_name: str
    status: EventStatus
    entry_count: int
    krw_income_sum: float
    krw_expense_sum: float
    baht_income_from_entries: float
    baht_expense_from_entries: float
    baht_fixed_income: float
    baht_fixed_expense: float
    additional_income: float
    additional_expense: float
    total_income: float
    total_expense: float
    total_profit: float
    displayed_krw_income: float
    displayed_krw_expense: float
    displayed_baht_income: float
    displayed_baht_expense: float
    guide: GuideSummary

    def as_dict(self) -> Dict[str, object]:
        return {
            "key": str(self.key),
            "event_name": self.event_name,
            "status": self.status.value,
            "entry_count": self.entry_count,
            "krw_income_sum": self.krw_income_sum,
            "krw_expense_sum": self.krw_expense_sum,
            "baht_income_from_entries": self.baht_income_from_entries,
            "baht_expense_from_entries": self.baht_expense_from_entries,
            "baht_fixed_income": self.baht_fixed_income,
            "baht_fixed_expense": self.baht_fixed_expense,
            "additional_income": self.additional_income,
            "additional_expense": self.additional_expense,
            "total_income": self.total_income,
            "total_expense": self.total_expense,
            "total_profit": self.total_profit,
            "displayed_krw_income": self.displayed_krw_income,
            "displayed_krw_expense": self.displayed_krw_expense,
            "displayed_baht_income": self.displayed_baht_income,
            "displayed_baht_expense": self.displayed_baht_expense,
            "guide_income": self.guide.income,
            "guide_expense": self.guide.expense,
            "guide_profit": self.guide.profit,
        }


@dataclass(frozen=True, slots=True)
class SettlementRow:
    """An event entry with the Baht figures the settlement sheet shows for it."""

    entry: Entry
    income: float
    expense: float
