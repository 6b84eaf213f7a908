from datetime import date

import pytest

from expense_tracker.database import ExpenseNotFoundError, ExpenseStore
from expense_tracker.screen import (
    ADD_LABEL,
    SAVE_LABEL,
    ExpenseScreen,
    FormState,
    ValidationError,
    validate_form,
)

TODAY = date(2025, 5, 14)


class SpyStore(ExpenseStore):
    """Real store that records which mutating calls were made."""

    def __init__(self, db_path):
        super().__init__(db_path)
        self.calls = []

    def create(self, *args):
        self.calls.append(("create", args))
        return super().create(*args)

    def update(self, *args):
        self.calls.append(("update", args))
        return super().update(*args)

    def delete(self, *args):
        self.calls.append(("delete", args))
        return super().delete(*args)


@pytest.fixture
def screen(tmp_path):
    screen = ExpenseScreen(SpyStore(str(tmp_path / "expenses.db")), today=TODAY)
    screen.reload()
    return screen


def _fill(screen, amount="10", category="Food", note="", expense_date=""):
    screen.state.form.amount = amount
    screen.state.form.category = category
    screen.state.form.note = note
    screen.state.form.date = expense_date


@pytest.mark.parametrize("amount", ["0", "-5", "abc", "", "   ", "nan", "inf", "12abc"])
def test_invalid_amount_never_reaches_store(screen, amount):
    _fill(screen, amount=amount)
    assert screen.handle_submit() is False
    assert screen.store.calls == []
    assert screen.state.error


@pytest.mark.parametrize("category", ["", "   ", "\t"])
def test_blank_category_never_reaches_store(screen, category):
    _fill(screen, category=category)
    assert screen.handle_submit() is False
    assert screen.store.calls == []
    assert screen.state.error == "Category is required."


def test_invalid_edit_does_not_update(screen):
    expense_id = screen.store.create(10, "Food", "", "2025-05-01")
    screen.start_edit(expense_id)
    screen.state.form.amount = "-1"
    assert screen.handle_submit() is False
    assert [name for name, _ in screen.store.calls] == ["create"]
    assert screen.store.get(expense_id).amount == 10.0


def test_empty_date_defaults_to_today(screen):
    _fill(screen, expense_date="  ")
    assert screen.handle_submit() is True
    assert screen.state.expenses[0].date == "2025-05-14"


def test_validate_form_trims_and_keeps_typed_date():
    values = validate_form(
        FormState(amount=" 12.5 ", category="  Food ", note=" lunch ", date=" 2025-05-02 "),
        TODAY,
    )
    assert values == (12.5, "Food", "lunch", "2025-05-02")
    with pytest.raises(ValidationError):
        validate_form(FormState(amount="1", category=""), TODAY)


def test_round_trip_create_update_delete(screen):
    _fill(screen, amount="10", category=" Food ", note="lunch", expense_date="2025-05-13")
    assert screen.handle_submit() is True
    assert screen.state.message == "Expense added"
    assert screen.state.form == FormState()

    created = screen.state.expenses[0]
    assert created.to_dict() == {
        "id": created.id,
        "amount": 10.0,
        "category": "Food",
        "note": "lunch",
        "date": "2025-05-13",
    }

    screen.start_edit(created.id)
    assert screen.state.form.submit_label == SAVE_LABEL
    assert screen.state.form.amount == "10"
    _fill(screen, amount="7.25", category="Dining", note="", expense_date="2025-05-12")
    assert screen.handle_submit() is True
    assert screen.state.message == "Expense updated"

    updated = screen.state.expenses[0]
    assert updated.id == created.id
    assert (updated.amount, updated.category, updated.note, updated.date) == (
        7.25,
        "Dining",
        "",
        "2025-05-12",
    )
    assert screen.state.form.submit_label == ADD_LABEL

    screen.delete(created.id)
    assert screen.state.expenses == []
    assert screen.store.list_all() == []


def test_list_is_stable_without_mutation(screen):
    screen.store.create(1, "Food", "", "2025-05-01")
    screen.store.create(2, "Rent", "", "2025-05-02")
    first = [e.to_dict() for e in screen.store.list_all()]
    second = [e.to_dict() for e in screen.store.list_all()]
    assert first == second


def test_edit_then_cancel_leaves_store_untouched(screen):
    expense_id = screen.store.create(10, "Food", "lunch", "2025-05-01")
    screen.store.calls.clear()
    screen.start_edit(expense_id)
    screen.state.form.amount = "99"
    screen.reset_form()

    assert screen.store.calls == []
    assert screen.state.form.is_editing is False
    assert screen.store.get(expense_id).amount == 10.0


def test_delete_of_edited_record_resets_form(screen):
    expense_id = screen.store.create(10, "Food", "", "2025-05-01")
    screen.start_edit(expense_id)
    screen.delete(expense_id)
    assert screen.state.form.is_editing is False


def test_start_edit_unknown_id(screen):
    with pytest.raises(ExpenseNotFoundError):
        screen.start_edit(123)


def test_submit_in_edit_mode_for_deleted_record_raises(screen):
    expense_id = screen.store.create(10, "Food", "", "2025-05-01")
    screen.start_edit(expense_id)
    screen.store.delete(expense_id)
    with pytest.raises(ExpenseNotFoundError):
        screen.handle_submit()


def test_filter_and_summary_follow_store(screen):
    screen.store.create(10, "Food", "", "2025-05-12")
    screen.store.create(5, "Food", "", "2025-05-02")
    screen.store.create(3, "Rent", "", "2025-04-30")
    screen.store.create(2, "Fun", "", "bogus")
    screen.reload()

    assert screen.summary().total == 20.0
    screen.set_filter("month")
    assert screen.summary().categories == {"Food": 15.0}
    screen.set_filter("week")
    assert [e.amount for e in screen.visible_expenses()] == [10.0]

    view = screen.view_model()
    assert view["chart"] == {"labels": ["Food"], "values": [10.0]}
    assert [f["active"] for f in view["filters"]] == [False, True, False]
    assert view["submit_label"] == ADD_LABEL
    assert view["has_expenses"] is True


def test_set_filter_rejects_unknown(screen):
    with pytest.raises(ValueError):
        screen.set_filter("year")


def test_delete_unknown_id_reports_error(screen):
    screen.store.create(10, "Food", "", "2025-05-01")
    assert screen.delete(999) is False
    assert screen.state.error == "Expense 999 not found"
    assert screen.state.message is None
    assert len(screen.state.expenses) == 1


def test_submit_remembers_saved_id(screen):
    other = screen.store.create(1, "Rent", "", "2025-05-01")
    _fill(screen)
    assert screen.handle_submit() is True
    created = screen.state.last_id
    assert created is not None and created != other
    assert screen.store.get(created).category == "Food"

    screen.start_edit(other)
    assert screen.handle_submit() is True
    assert screen.state.last_id == other
