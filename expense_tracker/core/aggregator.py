# expense_tracker/core/aggregator.py
from __future__ import annotations

import math
from typing import Dict, Iterable, List

from expense_tracker.core.models import CategorySummary, Expense

FALLBACK_CATEGORY = "Uncategorized"


def _amount_value(amount) -> float:
    if isinstance(amount, bool):
        return 0.0
    try:
        value = float(amount)
    except (TypeError, ValueError):
        return 0.0
    return value if math.isfinite(value) else 0.0


def summarize(expenses: Iterable[Expense]) -> CategorySummary:
    """Total the expenses overall and per category.

    Categories appear in the order they are first seen in *expenses*. Keys are
    used verbatim; only a missing or empty category falls back to
    ``FALLBACK_CATEGORY``. Amounts are summed unrounded.
    """
    summary = CategorySummary()
    for expense in expenses:
        amount = _amount_value(expense.amount)
        category = expense.category or FALLBACK_CATEGORY
        summary.categories[category] = summary.categories.get(category, 0.0) + amount
        summary.total += amount
    return summary


def chart_data(source) -> Dict[str, List]:
    """Return the ``labels``/``values`` pair fed to a chart renderer."""
    summary = source if isinstance(source, CategorySummary) else summarize(source)
    return {"labels": summary.labels, "values": summary.values}


def format_amount(value, symbol: str = "") -> str:
    return f"{symbol}{_amount_value(value):.2f}"
