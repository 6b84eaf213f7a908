import sqlite3

import pytest

from expense_tracker.database import ExpenseNotFoundError, ExpenseStore


def test_init_db_is_idempotent(tmp_path):
    db_path = tmp_path / "nested" / "expenses.db"
    store = ExpenseStore(str(db_path))
    store.create(5, "Food", "", "2025-05-01")
    ExpenseStore(str(db_path)).init_db()

    conn = sqlite3.connect(db_path)
    cols = [r[1] for r in conn.execute("PRAGMA table_info(expenses)").fetchall()]
    conn.close()
    assert cols == ["id", "amount", "category", "note", "date"]
    assert len(store.list_all()) == 1


def test_create_assigns_increasing_ids_and_lists_newest_first(tmp_path):
    store = ExpenseStore(str(tmp_path / "expenses.db"))
    first = store.create(10, "Food", "lunch", "2025-05-01")
    second = store.create(3.5, "Rent", "", "2025-05-02")
    assert second > first

    rows = store.list_all()
    assert [e.id for e in rows] == [second, first]
    assert rows[1].amount == 10.0
    assert rows[1].note == "lunch"
    assert rows == store.list_all()


def test_update_replaces_all_fields(tmp_path):
    store = ExpenseStore(str(tmp_path / "expenses.db"))
    expense_id = store.create(10, "Food", "lunch", "2025-05-01")
    store.update(expense_id, 12.25, "Dining", "", "2025-05-03")

    expense = store.get(expense_id)
    assert (expense.amount, expense.category, expense.note, expense.date) == (
        12.25,
        "Dining",
        "",
        "2025-05-03",
    )


def test_update_unknown_id_raises(tmp_path):
    store = ExpenseStore(str(tmp_path / "expenses.db"))
    with pytest.raises(ExpenseNotFoundError):
        store.update(42, 1, "Food", "", "2025-05-01")
    with pytest.raises(ExpenseNotFoundError):
        store.get(42)


def test_delete(tmp_path):
    store = ExpenseStore(str(tmp_path / "expenses.db"))
    keep = store.create(1, "Food", "", "2025-05-01")
    gone = store.create(2, "Rent", "", "2025-05-01")
    assert store.delete(gone) is True
    assert store.delete(999) is False
    assert [e.id for e in store.list_all()] == [keep]


def test_ids_are_not_reused_after_delete(tmp_path):
    store = ExpenseStore(str(tmp_path / "expenses.db"))
    first = store.create(1, "Food", "", "2025-05-01")
    store.delete(first)
    assert store.create(1, "Food", "", "2025-05-01") != first
