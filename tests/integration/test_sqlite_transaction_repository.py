import pytest
import sqlite3
from datetime import date
from decimal import Decimal

from finance_tracker.database.connection import DatabaseConfig, DatabaseManager
from finance_tracker.repositories.sqlite_transaction_repository import SQLiteTransactionRepository
from finance_tracker.domain.models import Transaction
from finance_tracker.domain.enums import TimeUnit, TransactionCategory, TransactionType
from finance_tracker.grouping import group
from finance_tracker.repositories.base import RepositoryError


@pytest.fixture
def test_db(tmp_path):
    """
    Create a real test database.

    Use pytest's tmp_path fixture to create a temporary directory.
    Database is automatically cleaned up after each test.
    """
    db_path = tmp_path / "test.db"
    db_manager = DatabaseManager(DatabaseConfig(db_path))
    db_manager.initialize_schema()

    yield db_manager

    db_manager.close()


@pytest.fixture
def repo(test_db):
    """Create a repository with a test database."""
    return SQLiteTransactionRepository(test_db)


@pytest.fixture
def sample_transaction():
    """Reusable sample transaction."""
    return Transaction(
        date=date(2025, 1, 15),
        type=TransactionType.EXPENSE,
        amount=Decimal("99.99"),
        category=TransactionCategory.CLOTHING,
        description="Winter jacket",
        owner="alice",
    )


@pytest.mark.integration
class TestSQLiteRepository:
    """Test suite for SQLite repository. Uses a real temp db."""

    def test_save_transaction(self, repo: SQLiteTransactionRepository, sample_transaction: Transaction):
        """Test saving creates a record with an ID."""
        # Act
        saved = repo.save(sample_transaction)

        # Assert
        assert saved.id is not None
        assert isinstance(saved.id, int)
        assert saved.id > 0
        assert sample_transaction.id is None

    def test_decimal_precision_preserved(self, repo: SQLiteTransactionRepository, sample_transaction: Transaction):
        test_amounts = [
            Decimal("99.99"),
            Decimal("0.01"),
            Decimal("1234567.89"),
            Decimal("19.95"),
            Decimal("0.33"),
        ]

        for amount in test_amounts:
            txn = Transaction(
                date=sample_transaction.date,
                type=sample_transaction.type,
                amount=amount,
                category=sample_transaction.category,
                owner=sample_transaction.owner,
            )

            saved = repo.save(txn)
            retrieved = repo.get_by_id(saved.id)

            assert retrieved.amount == amount, f"Lost precision for {amount}"
            assert isinstance(retrieved.amount, Decimal)

    def test_save_persists_all_fields(self, repo: SQLiteTransactionRepository, sample_transaction: Transaction):
        saved = repo.save(sample_transaction)
        retrieved = repo.get_by_id(saved.id)

        assert retrieved == saved

    def test_custom_category_round_trip(self, repo: SQLiteTransactionRepository):
        txn = Transaction(
            date=date(2025, 2, 1),
            type=TransactionType.INCOME,
            amount=Decimal("40"),
            category=TransactionCategory.CUSTOM,
            custom_category="Gifts",
            owner="alice",
        )

        retrieved = repo.get_by_id(repo.save(txn).id)

        assert retrieved.category == TransactionCategory.CUSTOM
        assert retrieved.custom_category == "Gifts"
        assert retrieved.description == "N/A"

    def test_get_by_id_returns_none_for_missing_id(self, repo: SQLiteTransactionRepository):
        assert repo.get_by_id(999) is None

    def test_get_all_returns_empty_list_initially(self, repo: SQLiteTransactionRepository):
        assert repo.get_all() == []

    def test_get_all_is_ascending_by_date(self, repo: SQLiteTransactionRepository, sample_transaction):
        days = [date(2025, 3, 1), date(2025, 1, 1), date(2025, 2, 1), date(2025, 1, 1)]
        for day in days:
            repo.save(Transaction(
                date=day,
                type=TransactionType.EXPENSE,
                amount=Decimal("1"),
                category=TransactionCategory.FOOD,
                owner="alice",
            ))

        result = repo.get_all(owner="alice")

        assert [t.date for t in result] == sorted(days)
        assert result[0].id < result[1].id

    def test_get_all_filters(self, repo: SQLiteTransactionRepository):
        repo.save_many([
            Transaction(date=date(2025, 1, 5), type=TransactionType.INCOME, amount=Decimal("100"),
                        category=TransactionCategory.SAVINGS, owner="alice"),
            Transaction(date=date(2025, 1, 20), type=TransactionType.EXPENSE, amount=Decimal("20"),
                        category=TransactionCategory.FOOD, owner="alice"),
            Transaction(date=date(2025, 2, 3), type=TransactionType.EXPENSE, amount=Decimal("30"),
                        category=TransactionCategory.FOOD, owner="alice"),
            Transaction(date=date(2025, 1, 10), type=TransactionType.EXPENSE, amount=Decimal("5"),
                        category=TransactionCategory.FOOD, owner="bob"),
        ])

        assert len(repo.get_all(owner="alice")) == 3
        assert len(repo.get_all(owner="bob")) == 1
        assert len(repo.get_all(owner="alice", start_date=date(2025, 1, 10), end_date=date(2025, 1, 31))) == 1
        assert len(repo.get_all(owner="alice", transaction_type=TransactionType.EXPENSE)) == 2
        assert len(repo.get_all(category=TransactionCategory.FOOD)) == 3

    def test_delete(self, repo: SQLiteTransactionRepository, sample_transaction):
        saved = repo.save(sample_transaction)

        assert repo.delete(saved.id) is True
        assert repo.get_by_id(saved.id) is None
        assert repo.delete(saved.id) is False

    def test_delete_many(self, repo: SQLiteTransactionRepository, sample_transaction):
        saved = repo.save_many([sample_transaction, sample_transaction, sample_transaction])

        deleted = repo.delete_many([saved[0].id, saved[2].id, 12345])

        assert deleted == 2
        assert [t.id for t in repo.get_all()] == [saved[1].id]

    def test_save_many_is_all_or_nothing(self, repo: SQLiteTransactionRepository, sample_transaction, test_db, mocker):
        good = sample_transaction
        mocker.patch.object(
            SQLiteTransactionRepository,
            "_to_params",
            side_effect=[SQLiteTransactionRepository._to_params(good), ("x",)],
        )

        with pytest.raises(RepositoryError):
            repo.save_many([good, good])

        assert test_db.get_connection().execute("SELECT COUNT(*) FROM transactions").fetchone()[0] == 0

    def test_schema_rejects_unknown_type(self, test_db):
        with pytest.raises(sqlite3.IntegrityError):
            with test_db.transaction() as conn:
                conn.execute(
                    "INSERT INTO transactions (owner, date, type, amount, category) VALUES (?, ?, ?, ?, ?)",
                    ("alice", "2025-01-01", "Refund", "1.00", "Food"),
                )

    def test_initialize_schema_is_idempotent(self, test_db, repo, sample_transaction):
        repo.save(sample_transaction)

        test_db.initialize_schema()

        assert len(repo.get_all()) == 1

    def test_initialize_schema_reports_version(self, test_db):
        version = test_db.initialize_schema()

        assert version == test_db.schema_version()
        assert version[0] == 1
        assert "custom categories" in version[1]

    def test_transaction_rolls_back_on_error(self, test_db, repo):
        with pytest.raises(RuntimeError):
            with test_db.transaction() as conn:
                conn.execute(
                    "INSERT INTO transactions (owner, date, type, amount, category) VALUES (?, ?, ?, ?, ?)",
                    ("alice", "2025-01-01", "Expense", "1.00", "Food"),
                )
                raise RuntimeError("boom")

        assert repo.get_all() == []

    def test_stored_transactions_group_by_month(self, repo: SQLiteTransactionRepository):
        for day, amount, kind in [
            (date(2024, 3, 1), "100", TransactionType.INCOME),
            (date(2024, 3, 15), "40", TransactionType.EXPENSE),
            (date(2024, 10, 2), "5", TransactionType.EXPENSE),
        ]:
            repo.save(Transaction(date=day, type=kind, amount=Decimal(amount),
                                  category=TransactionCategory.OTHER, owner="alice"))

        summary = group(repo.get_all(owner="alice"), TimeUnit.MONTH)

        assert list(summary.groups) == ["March 2024", "October 2024"]
        assert summary.net_result == Decimal("55")
