# expense_tracker/core/models.py
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List


class FilterMode(str, Enum):
    ALL = "all"
    WEEK = "week"
    MONTH = "month"

    @property
    def label(self) -> str:
        return _FILTER_LABELS[self]

    @classmethod
    def parse(cls, value: str | None) -> "FilterMode":
        if value is None or not value.strip():
            return cls.ALL
        try:
            return cls(value.strip().lower())
        except ValueError:
            raise ValueError(
                f"Unknown filter '{value}'. Expected one of: all, week, month"
            ) from None


_FILTER_LABELS = {
    FilterMode.ALL: "All",
    FilterMode.WEEK: "This Week",
    FilterMode.MONTH: "This Month",
}


@dataclass(eq=False)
class Expense:
    id: int | None
    amount: float
    category: str
    note: str = ""
    date: str = ""

    def __eq__(self, other):
        if not isinstance(other, Expense):
            return NotImplemented
        return self.id == other.id

    def __hash__(self):
        return hash(self.id)

    def to_dict(self) -> Dict[str, object]:
        return {
            "id": self.id,
            "amount": self.amount,
            "category": self.category,
            "note": self.note,
            "date": self.date,
        }


@dataclass
class CategorySummary:
    total: float = 0.0
    categories: Dict[str, float] = field(default_factory=dict)

    @property
    def labels(self) -> List[str]:
        return list(self.categories.keys())

    @property
    def values(self) -> List[float]:
        return list(self.categories.values())
