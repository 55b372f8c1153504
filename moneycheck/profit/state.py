"""Mini README: Stored profit rollup configuration.

Structure:
    * ProfitIncome - per-event inclusion flag and optional manual amount.
    * ProfitExpense - manually entered expense unrelated to any event.
    * ProfitState - the whole ``profit_state`` document.
    * ProfitLine / ProfitTotals - computed read models.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional

from ..events import EventKey, EventStatus
from ..ledger.coercion import make_id, safe_trim, to_float, to_optional_float
from ..logging_utils import get_logger

LOGGER = get_logger(__name__)


@dataclass(slots=True)
class ProfitIncome:
    event_name: str = ""
    month: str = ""
    enabled: bool = True
    amount_override: Optional[float] = None

    def as_dict(self) -> Dict[str, object]:
        return {
            "event_name": self.event_name,
            "month": self.month,
            "enabled": self.enabled,
            "amount_override": self.amount_override,
        }

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "ProfitIncome":
        enabled = payload.get("enabled")
        return cls(
            event_name=str(payload.get("event_name") or ""),
            month=str(payload.get("month") or ""),
            enabled=enabled if isinstance(enabled, bool) else True,
            amount_override=to_optional_float(payload.get("amount_override")),
        )


@dataclass(slots=True)
class ProfitExpense:
    id: str
    label: str = ""
    amount: float = 0.0

    def as_dict(self) -> Dict[str, object]:
        return {"id": self.id, "label": self.label, "amount": self.amount}

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "ProfitExpense":
        return cls(
            id=safe_trim(payload.get("id")) or make_id(),
            label=str(payload.get("label") or ""),
            amount=to_float(payload.get("amount")),
        )


@dataclass(slots=True)
class ProfitState:
    incomes: Dict[EventKey, ProfitIncome] = field(default_factory=dict)
    expenses: List[ProfitExpense] = field(default_factory=list)

    def as_dict(self) -> Dict[str, object]:
        return {
            "incomes": {str(key): income.as_dict() for key, income in self.incomes.items()},
            "expenses": [expense.as_dict() for expense in self.expenses],
        }

    @classmethod
    def from_payload(cls, payload: object) -> "ProfitState":
        """Coerce a stored document; anything malformed becomes an empty part."""

        if not isinstance(payload, Mapping):
            if payload is not None:
                LOGGER.warning("Profit document is not an object; starting empty")
            return cls()
        state = cls()
        incomes = payload.get("incomes")
        if isinstance(incomes, Mapping):
            for key_text, value in incomes.items():
                if isinstance(value, Mapping):
                    state.incomes[EventKey.parse(str(key_text))] = ProfitIncome.from_dict(value)
                else:
                    LOGGER.warning("Dropping profit income %s that is not an object", key_text)
        expenses = payload.get("expenses")
        if isinstance(expenses, list):
            state.expenses = [
                ProfitExpense.from_dict(element)
                for element in expenses
                if isinstance(element, Mapping)
            ]
        return state


@dataclass(frozen=True, slots=True)
class ProfitLine:
    """One stored income record with the amount it would contribute."""

    key: EventKey
    event_name: str
    month: str
    enabled: bool
    status: EventStatus
    computed_profit: float
    amount_override: Optional[float]

    @property
    def amount(self) -> float:
        return self.computed_profit if self.amount_override is None else self.amount_override

    @property
    def counted(self) -> bool:
        return self.enabled and self.status is EventStatus.ACTIVE

    def as_dict(self) -> Dict[str, object]:
        return {
            "key": str(self.key),
            "event_name": self.event_name,
            "month": self.month,
            "enabled": self.enabled,
            "status": self.status.value,
            "computed_profit": self.computed_profit,
            "amount_override": self.amount_override,
            "amount": self.amount,
            "counted": self.counted,
        }


@dataclass(frozen=True, slots=True)
class ProfitTotals:
    total_income: float
    total_expense: float
    lines: List[ProfitLine]
    expenses: List[ProfitExpense]

    @property
    def total_profit(self) -> float:
        return self.total_income - self.total_expense

    def as_dict(self) -> Dict[str, object]:
        return {
            "total_income": self.total_income,
            "total_expense": self.total_expense,
            "total_profit": self.total_profit,
            "incomes": [line.as_dict() for line in self.lines],
            "expenses": [expense.as_dict() for expense in self.expenses],
        }
