import logging
import sqlite3
from pathlib import Path
from typing import List

from expense_tracker.core.models import Expense

logger = logging.getLogger(__name__)


class ExpenseNotFoundError(LookupError):
    """Raised when no expense exists for the requested id."""

    def __init__(self, expense_id: int):
        super().__init__(f"Expense {expense_id} not found")
        self.expense_id = expense_id


def _init_db(conn: sqlite3.Connection) -> None:
    conn.execute(
        """
        CREATE TABLE IF NOT EXISTS expenses (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            amount REAL NOT NULL,
            category TEXT NOT NULL,
            note TEXT,
            date TEXT NOT NULL
        )
        """
    )
    conn.commit()


def _row_to_expense(row) -> Expense:
    return Expense(
        id=int(row[0]),
        amount=row[1],
        category=row[2],
        note=row[3] or "",
        date=row[4],
    )


class ExpenseStore:
    """SQLite-backed record store for expenses.

    Every method opens its own connection and commits once, so each create,
    update or delete is its own unit of work. ``sqlite3`` errors are left to
    propagate to the caller.
    """

    def __init__(self, db_path: str):
        self.db_path = str(db_path)
        self.init_db()

    def _connect(self) -> sqlite3.Connection:
        return sqlite3.connect(self.db_path)

    def init_db(self) -> None:
        Path(self.db_path).parent.mkdir(parents=True, exist_ok=True)
        conn = self._connect()
        try:
            _init_db(conn)
        finally:
            conn.close()

    def create(self, amount: float, category: str, note: str, date: str) -> int:
        conn = self._connect()
        try:
            cur = conn.execute(
                "INSERT INTO expenses (amount, category, note, date) VALUES (?, ?, ?, ?)",
                (float(amount), category, note, date),
            )
            conn.commit()
            expense_id = int(cur.lastrowid)
        finally:
            conn.close()
        logger.info("Created expense %s (%s, %.2f)", expense_id, category, amount)
        return expense_id

    def list_all(self) -> List[Expense]:
        """Return every expense, most recently created first."""
        conn = self._connect()
        try:
            rows = conn.execute(
                "SELECT id, amount, category, note, date FROM expenses ORDER BY id DESC"
            ).fetchall()
        finally:
            conn.close()
        logger.debug("Loaded %d expense(s) from %s", len(rows), self.db_path)
        return [_row_to_expense(r) for r in rows]

    def get(self, expense_id: int) -> Expense:
        conn = self._connect()
        try:
            row = conn.execute(
                "SELECT id, amount, category, note, date FROM expenses WHERE id = ?",
                (expense_id,),
            ).fetchone()
        finally:
            conn.close()
        if row is None:
            raise ExpenseNotFoundError(expense_id)
        return _row_to_expense(row)

    def update(
        self,
        expense_id: int,
        amount: float,
        category: str,
        note: str,
        date: str,
    ) -> None:
        conn = self._connect()
        try:
            cur = conn.execute(
                """
                UPDATE expenses
                SET amount = ?, category = ?, note = ?, date = ?
                WHERE id = ?
                """,
                (float(amount), category, note, date, expense_id),
            )
            if cur.rowcount == 0:
                raise ExpenseNotFoundError(expense_id)
            conn.commit()
        finally:
            conn.close()
        logger.info("Updated expense %s", expense_id)

    def delete(self, expense_id: int) -> bool:
        """Remove an expense; returns ``False`` if no row had that id."""
        conn = self._connect()
        try:
            cur = conn.execute("DELETE FROM expenses WHERE id = ?", (expense_id,))
            conn.commit()
            deleted = cur.rowcount
        finally:
            conn.close()
        if deleted:
            logger.info("Deleted expense %s", expense_id)
        else:
            logger.debug("Delete of unknown expense %s ignored", expense_id)
        return bool(deleted)
