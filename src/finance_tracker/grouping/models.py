"""
Result types of the grouping engine.

These are projections rebuilt on every query and never persisted.
"""
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Dict, List

from finance_tracker.domain.enums import TimeUnit
from finance_tracker.domain.models import CategoryKey, Transaction
from finance_tracker.grouping.keys import SortKey

ZERO = Decimal("0.00")


@dataclass
class CategoryTotals:
    """Income and expense subtotals for one category"""
    income: Decimal = ZERO
    expense: Decimal = ZERO

    @property
    def net(self) -> Decimal:
        return self.income - self.expense

    def add(self, transaction: Transaction) -> None:
        if transaction.is_income:
            self.income += transaction.amount
        else:
            self.expense += transaction.amount


@dataclass
class Bucket:
    """
    Transactions sharing one time-period key.

    Keeps its own running totals so a display layer can print
    per-period subtotals without re-scanning.
    """
    key: str
    sort_key: SortKey
    transactions: List[Transaction] = field(default_factory=list)
    total_income: Decimal = ZERO
    total_expense: Decimal = ZERO
    incomes_by_category: Dict[CategoryKey, Decimal] = field(default_factory=dict)
    expenses_by_category: Dict[CategoryKey, Decimal] = field(default_factory=dict)

    @property
    def net_result(self) -> Decimal:
        return self.total_income - self.total_expense

    def add(self, transaction: Transaction) -> None:
        """Append a transaction and update the bucket totals"""
        self.transactions.append(transaction)
        if transaction.is_income:
            self.total_income += transaction.amount
            by_category = self.incomes_by_category
        else:
            self.total_expense += transaction.amount
            by_category = self.expenses_by_category

        category_key = transaction.category_key
        by_category[category_key] = by_category.get(category_key, ZERO) + transaction.amount

    def __len__(self) -> int:
        return len(self.transactions)


@dataclass
class Summary:
    """
    Grouped view of a transaction list.

    Buckets are in ascending chronological order. Totals cover the whole
    input, not a single bucket.
    """
    time_unit: TimeUnit
    buckets: List[Bucket] = field(default_factory=list)
    total_income: Decimal = ZERO
    total_expense: Decimal = ZERO
    net_result: Decimal = ZERO

    @property
    def groups(self) -> Dict[str, List[Transaction]]:
        """Ordered mapping of group key to its transactions"""
        return {bucket.key: list(bucket.transactions) for bucket in self.buckets}

    @property
    def transactions(self) -> List[Transaction]:
        """
        All transactions, bucket by bucket in key order.

        This is the numbering used by pick-by-number flows (1-based).
        """
        return [txn for bucket in self.buckets for txn in bucket.transactions]

    @property
    def transaction_count(self) -> int:
        return sum(len(bucket) for bucket in self.buckets)

    @property
    def is_empty(self) -> bool:
        return not self.buckets
