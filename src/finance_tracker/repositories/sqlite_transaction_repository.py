import sqlite3
from dataclasses import replace
from datetime import date
from decimal import Decimal
from typing import Iterable, List, Optional

from finance_tracker.database.connection import DatabaseManager
from finance_tracker.domain.models import Transaction
from finance_tracker.domain.enums import TransactionCategory, TransactionType
from finance_tracker.logging_setup import get_logger
from finance_tracker.repositories.base import RepositoryError, TransactionRepository

logger = get_logger("finance_tracker.repositories.sqlite")

_INSERT_SQL = """
    INSERT INTO transactions (
        owner, date, type, amount, category, custom_category, description
    ) VALUES (?, ?, ?, ?, ?, ?, ?)
"""


class SQLiteTransactionRepository(TransactionRepository):
    """
    SQLite implementation of the TransactionRepository.

    Handles all database operations for transactions using raw SQL.
    """

    def __init__(self, db_manager: DatabaseManager):
        self.db = db_manager

    def save(self, transaction: Transaction) -> Transaction:
        """Save a single transaction."""
        try:
            with self.db.transaction() as conn:
                cursor = conn.execute(_INSERT_SQL, self._to_params(transaction))
        except sqlite3.Error as e:
            raise RepositoryError(f"Could not save {transaction!r}: {e}") from e

        return replace(transaction, id=cursor.lastrowid)

    def save_many(self, transactions: List[Transaction]) -> List[Transaction]:
        """Save multiple transactions, all or nothing"""
        saved = []
        try:
            with self.db.transaction() as conn:
                for txn in transactions:
                    cursor = conn.execute(_INSERT_SQL, self._to_params(txn))
                    saved.append(replace(txn, id=cursor.lastrowid))
        except sqlite3.Error as e:
            raise RepositoryError(f"Could not save transactions: {e}") from e

        return saved

    def get_by_id(self, transaction_id: int) -> Optional[Transaction]:
        """Retrieve a transaction by ID, or None if it doesn't exist"""
        conn = self.db.get_connection()
        cursor = conn.execute(
            "SELECT * FROM transactions WHERE id = ?",
            (transaction_id,)
        )
        row = cursor.fetchone()

        if row is None:
            return None

        return self._row_to_transaction(row)

    def get_all(
            self,
            owner: Optional[str] = None,
            start_date: Optional[date] = None,
            end_date: Optional[date] = None,
            transaction_type: Optional[TransactionType] = None,
            category: Optional[TransactionCategory] = None,
    ) -> List[Transaction]:
        """Retrieve transactions with optional filtering."""
        query = "SELECT * FROM transactions WHERE 1=1"
        params = []

        if owner:
            query += " AND owner = ?"
            params.append(owner)

        if start_date:
            query += " AND date >= ?"
            params.append(start_date.isoformat())

        if end_date:
            query += " AND date <= ?"
            params.append(end_date.isoformat())

        if transaction_type:
            query += " AND type = ?"
            params.append(transaction_type.value)

        if category:
            query += " AND category = ?"
            params.append(category.value)

        query += " ORDER BY date ASC, id ASC"

        conn = self.db.get_connection()
        rows = conn.execute(query, params).fetchall()

        return [self._row_to_transaction(row) for row in rows]

    def delete(self, transaction_id: int) -> bool:
        """Delete a transaction by ID."""
        with self.db.transaction() as conn:
            cursor = conn.execute(
                "DELETE FROM transactions WHERE id = ?",
                (transaction_id,)
            )
            return cursor.rowcount > 0

    def delete_many(self, transaction_ids: Iterable[int]) -> int:
        """Delete the given IDs, returning how many rows went away"""
        deleted = 0
        with self.db.transaction() as conn:
            for transaction_id in transaction_ids:
                cursor = conn.execute(
                    "DELETE FROM transactions WHERE id = ?",
                    (transaction_id,)
                )
                deleted += cursor.rowcount
        logger.debug("Deleted %d transaction row(s)", deleted)
        return deleted

    @staticmethod
    def _to_params(transaction: Transaction) -> tuple:
        return (
            transaction.owner,
            transaction.date.isoformat(),
            transaction.type.value,
            str(transaction.amount), # Store as string for precision
            transaction.category.value,
            transaction.custom_category,
            transaction.description,
        )

    def _row_to_transaction(self, row: sqlite3.Row) -> Transaction:
        """Convert database row to Transaction object."""
        return Transaction(
            id=row["id"],
            owner=row["owner"],
            date=date.fromisoformat(row["date"]),
            type=TransactionType(row["type"]),
            amount=Decimal(row["amount"]),
            category=TransactionCategory(row["category"]),
            custom_category=row["custom_category"],
            description=row["description"],
        )
