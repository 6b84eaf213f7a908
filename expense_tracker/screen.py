"""State and event handling for the expense screen.

The store is the single source of truth. ``ScreenState.expenses`` is only a
cache of ``ExpenseStore.list_all()`` that is thrown away and reloaded after
every mutation; the filtered list, totals and chart data are derived from it
on demand.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from datetime import date
from typing import Dict, List, NamedTuple

from expense_tracker.core.aggregator import chart_data, summarize
from expense_tracker.core.filters import filter_expenses
from expense_tracker.core.models import CategorySummary, Expense, FilterMode
from expense_tracker.database import ExpenseStore

logger = logging.getLogger(__name__)

ADD_LABEL = "Add Expense"
SAVE_LABEL = "Save Changes"


class ValidationError(ValueError):
    """Raised when submitted form values cannot be stored."""


class ValidatedExpense(NamedTuple):
    amount: float
    category: str
    note: str
    date: str


@dataclass
class FormState:
    amount: str = ""
    category: str = ""
    note: str = ""
    date: str = ""
    editing_id: int | None = None

    @property
    def is_editing(self) -> bool:
        return self.editing_id is not None

    @property
    def submit_label(self) -> str:
        return SAVE_LABEL if self.is_editing else ADD_LABEL


@dataclass
class ScreenState:
    expenses: List[Expense] = field(default_factory=list)
    form: FormState = field(default_factory=FormState)
    filter_mode: FilterMode = FilterMode.ALL
    message: str | None = None
    error: str | None = None
    last_id: int | None = None


def _amount_text(amount: float) -> str:
    text = repr(float(amount))
    return text[:-2] if text.endswith(".0") else text


def validate_form(form: FormState, today: date | None = None) -> ValidatedExpense:
    """Check the raw form values and normalize them for the store.

    Raises
    ------
    ValidationError
        If the amount is not a positive number or the category is blank.
    """
    raw_amount = (form.amount or "").strip()
    try:
        amount = float(raw_amount)
    except ValueError:
        raise ValidationError("Amount must be a number.") from None
    if not math.isfinite(amount) or amount <= 0:
        raise ValidationError("Amount must be greater than zero.")

    category = (form.category or "").strip()
    if not category:
        raise ValidationError("Category is required.")

    note = (form.note or "").strip()
    expense_date = (form.date or "").strip()
    if not expense_date:
        expense_date = (today or date.today()).isoformat()
    return ValidatedExpense(amount, category, note, expense_date)


class ExpenseScreen:
    """Controller for the expense screen.

    Parameters
    ----------
    store:
        Record store all mutations go through.
    today:
        Fixed reference date for filtering and default dates. When omitted the
        local date at the moment of each call is used.
    """

    def __init__(
        self,
        store: ExpenseStore,
        today: date | None = None,
        state: ScreenState | None = None,
    ):
        self.store = store
        self.today = today
        self.state = state or ScreenState()

    def _today(self) -> date:
        return self.today or date.today()

    def reload(self) -> List[Expense]:
        self.state.expenses = self.store.list_all()
        return self.state.expenses

    def handle_submit(self) -> bool:
        """Create or update an expense from the form.

        Returns ``False`` without touching the store when the form is invalid.
        """
        form = self.state.form
        self.state.message = None
        self.state.error = None
        try:
            values = validate_form(form, self._today())
        except ValidationError as exc:
            logger.info("Rejected expense submission: %s", exc)
            self.state.error = str(exc)
            return False

        if form.is_editing:
            self.store.update(form.editing_id, *values)
            self.state.last_id = form.editing_id
            self.state.message = "Expense updated"
        else:
            self.state.last_id = self.store.create(*values)
            self.state.message = "Expense added"
        self.reset_form()
        self.reload()
        return True

    def start_edit(self, expense_id: int) -> Expense:
        expense = self.store.get(expense_id)
        self.state.form = FormState(
            amount=_amount_text(expense.amount),
            category=expense.category,
            note=expense.note,
            date=expense.date,
            editing_id=expense.id,
        )
        return expense

    def reset_form(self) -> None:
        self.state.form = FormState()

    def delete(self, expense_id: int) -> bool:
        self.state.message = None
        self.state.error = None
        deleted = self.store.delete(expense_id)
        if self.state.form.editing_id == expense_id:
            self.reset_form()
        if deleted:
            self.state.message = "Expense deleted"
        else:
            self.state.error = f"Expense {expense_id} not found"
        self.reload()
        return deleted

    def set_filter(self, mode) -> FilterMode:
        if not isinstance(mode, FilterMode):
            mode = FilterMode.parse(mode)
        self.state.filter_mode = mode
        return mode

    def visible_expenses(self) -> List[Expense]:
        return filter_expenses(self.state.expenses, self.state.filter_mode, self._today())

    def summary(self) -> CategorySummary:
        return summarize(self.visible_expenses())

    def view_model(self) -> Dict[str, object]:
        visible = self.visible_expenses()
        summary = summarize(visible)
        return {
            "expenses": visible,
            "has_expenses": bool(self.state.expenses),
            "summary": summary,
            "chart": chart_data(summary),
            "filter_mode": self.state.filter_mode,
            "filters": [
                {
                    "value": mode.value,
                    "label": mode.label,
                    "active": mode is self.state.filter_mode,
                }
                for mode in FilterMode
            ],
            "form": self.state.form,
            "submit_label": self.state.form.submit_label,
            "message": self.state.message,
            "error": self.state.error,
        }
