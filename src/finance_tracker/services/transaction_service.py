from calendar import monthrange
from datetime import date
from decimal import Decimal
from typing import Callable, Dict, List, Optional, Union

from finance_tracker.domain.enums import TimeUnit, TransactionType
from finance_tracker.domain.models import (
    CategoryKey,
    InvalidTransactionError,
    Transaction,
)
from finance_tracker.grouping import CategoryTotals, Summary, aggregate_by_category, group
from finance_tracker.logging_setup import get_logger
from finance_tracker.repositories.base import TransactionNotFoundError, TransactionRepository
from finance_tracker.services.models import DeleteResult, TransactionInput

logger = get_logger("finance_tracker.services.transaction_service")

MAX_AMOUNT = Decimal("999999999")
MAX_YEARS_BACK = 100
MAX_MONTHS_AHEAD = 6


def _shift_months(day: date, months: int) -> date:
    """Move a date by whole months, clamping the day to the target month"""
    index = day.year * 12 + (day.month - 1) + months
    year, month = divmod(index, 12)
    month += 1
    return date(year, month, min(day.day, monthrange(year, month)[1]))


class TransactionService:

    def __init__(
        self,
        repository: TransactionRepository,
        today: Callable[[], date] = date.today,
    ):
        self.repository = repository
        self._today = today

    def validate_input(self, data: TransactionInput) -> None:
        """
        Check user input against the entry rules.

        Raises:
            InvalidTransactionError: If the amount or date is out of range
        """
        if not data.amount.is_finite():
            raise InvalidTransactionError(f"Invalid amount: {data.amount}")
        if data.amount <= 0:
            raise InvalidTransactionError("Amount must be greater than 0")
        if data.amount > MAX_AMOUNT:
            raise InvalidTransactionError("Amount is unreasonably large")

        today = self._today()
        if data.date < _shift_months(today, -12 * MAX_YEARS_BACK):
            raise InvalidTransactionError(
                f"Date cannot be more than {MAX_YEARS_BACK} years in the past"
            )
        if data.date > _shift_months(today, MAX_MONTHS_AHEAD):
            raise InvalidTransactionError(
                f"Date cannot be more than {MAX_MONTHS_AHEAD} months in the future"
            )

    def create_transaction(
        self,
        data: TransactionInput,
        transaction_type: TransactionType,
        owner: str,
    ) -> Transaction:
        """Build a domain transaction from input, without saving it"""
        return Transaction(
            date=data.date,
            type=transaction_type,
            amount=data.amount,
            category=data.category,
            custom_category=data.custom_category,
            description=data.description,
            owner=owner,
        )

    def add_transaction(
        self,
        data: TransactionInput,
        transaction_type: TransactionType,
        owner: str,
    ) -> Transaction:
        """
        Validate, create and save a transaction.

        Returns:
            The saved transaction with its ID
        """
        self.validate_input(data)
        transaction = self.create_transaction(data, transaction_type, owner)
        saved = self.repository.save(transaction)
        logger.info("Added %s for %s", saved, owner)
        return saved

    def get_transactions(
        self,
        owner: str,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        transaction_type: Optional[TransactionType] = None,
    ) -> List[Transaction]:
        """
        Query a user's transactions with optional filters.

        Returns:
            Matching transactions, ascending by date
        """
        return self.repository.get_all(
            owner=owner,
            start_date=start_date,
            end_date=end_date,
            transaction_type=transaction_type,
        )

    def summarize(self, owner: str, time_unit: Union[TimeUnit, str]) -> Summary:
        """
        Grouped view of a user's transactions.

        Raises:
            InvalidTimeUnitError: Before any storage access, for an unknown unit
        """
        unit = TimeUnit.parse(time_unit)
        return group(self.get_transactions(owner), unit)

    def category_totals(
        self,
        owner: str,
        transaction_type: Optional[TransactionType] = None,
    ) -> Dict[CategoryKey, CategoryTotals]:
        """Per-category income and expense totals for a user"""
        return aggregate_by_category(
            self.get_transactions(owner, transaction_type=transaction_type)
        )

    def account_balance(self, owner: str) -> Decimal:
        """Income minus expenses over all of a user's transactions"""
        return group(self.get_transactions(owner), TimeUnit.YEAR).net_result

    def remove_by_index(self, owner: str, index: int) -> Transaction:
        """
        Remove the transaction shown at a 1-based position in the day view.

        Raises:
            IndexError: If index is outside 1..count
            TransactionNotFoundError: If the row vanished from storage
        """
        transactions = self.summarize(owner, TimeUnit.DAY).transactions
        if not 1 <= index <= len(transactions):
            raise IndexError(
                f"Transaction number must be between 1 and {len(transactions)}, got {index}"
            )

        target = transactions[index - 1]
        if not self.repository.delete(target.id):
            raise TransactionNotFoundError(f"Transaction with ID {target.id} not found")

        logger.info("Removed %s for %s", target, owner)
        return target

    def delete_by_category(self, owner: str, category_key: CategoryKey) -> DeleteResult:
        """
        Delete every transaction of a user filed under one category.

        Fixed and custom categories are told apart the same way as in
        aggregate_by_category.
        """
        transactions = self.get_transactions(owner)
        criteria = f"category '{category_key}'"

        if category_key not in aggregate_by_category(transactions):
            return DeleteResult(criteria=criteria)

        matched = [t for t in transactions if t.category_key == category_key]
        deleted = self.repository.delete_many([t.id for t in matched])
        logger.info("Deleted %d transaction(s) in %s for %s", deleted, criteria, owner)
        return DeleteResult(matched=matched, deleted=deleted, criteria=criteria)

    def delete_by_date_range(self, owner: str, start_date: date, end_date: date) -> DeleteResult:
        """
        Delete a user's transactions dated within [start_date, end_date].

        Raises:
            ValueError: If start_date is after end_date
        """
        if start_date > end_date:
            raise ValueError("Start date cannot be after end date")

        matched = self.get_transactions(owner, start_date=start_date, end_date=end_date)
        criteria = f"dates {start_date:%Y-%m-%d} to {end_date:%Y-%m-%d}"
        if not matched:
            return DeleteResult(criteria=criteria)

        deleted = self.repository.delete_many([t.id for t in matched])
        logger.info("Deleted %d transaction(s) in %s for %s", deleted, criteria, owner)
        return DeleteResult(matched=matched, deleted=deleted, criteria=criteria)
