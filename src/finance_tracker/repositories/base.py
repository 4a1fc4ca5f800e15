from abc import ABC, abstractmethod
from datetime import date
from typing import Iterable, List, Optional

from finance_tracker.domain.models import Transaction
from finance_tracker.domain.enums import TransactionCategory, TransactionType


class RepositoryError(Exception):
    """Raised when the storage backend fails."""
    pass


class TransactionNotFoundError(RepositoryError):
    """Raised when a transaction cannot be found."""
    pass


class TransactionRepository(ABC):
    """
    Abstract repository for transaction persistence.

    The grouping code only ever sees lists of transactions, so the
    storage backend can be swapped without touching it.
    """

    @abstractmethod
    def save(self, transaction: Transaction) -> Transaction:
        """
        Save a transaction to the repository.

        Args:
            transaction: Transaction to save

        Returns:
            A copy of the transaction with its ID populated
        """
        pass

    @abstractmethod
    def save_many(self, transactions: List[Transaction]) -> List[Transaction]:
        """
        Save multiple transactions in a single operation.

        Returns:
            List of saved transactions with IDs
        """
        pass

    @abstractmethod
    def get_by_id(self, transaction_id: int) -> Optional[Transaction]:
        """
        Retrieve a transaction by ID.

        Returns:
            Transaction if found, None otherwise
        """
        pass

    @abstractmethod
    def get_all(
        self,
        owner: Optional[str] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        transaction_type: Optional[TransactionType] = None,
        category: Optional[TransactionCategory] = None,
    ) -> List[Transaction]:
        """
        Retrieve transactions with optional filtering.

        Args:
            owner: Only transactions created by this user
            start_date: Filter transactions on or after this date
            end_date: Filter transactions on or before this date
            transaction_type: Filter by INCOME or EXPENSE
            category: Filter by category

        Returns:
            Matching transactions, ascending by date (ties by ID)
        """
        pass

    @abstractmethod
    def delete(self, transaction_id: int) -> bool:
        """
        Delete a transaction by ID.

        Returns:
            True if deleted, False if not found
        """
        pass

    @abstractmethod
    def delete_many(self, transaction_ids: Iterable[int]) -> int:
        """
        Delete several transactions in one database transaction.

        Returns:
            Number of rows deleted
        """
        pass
