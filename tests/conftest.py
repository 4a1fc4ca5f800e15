import pytest
from datetime import date
from decimal import Decimal
from typing import Callable, List, Optional

from finance_tracker.domain.enums import TransactionCategory, TransactionType
from finance_tracker.domain.models import Transaction


@pytest.fixture
def make_transaction() -> Callable[..., Transaction]:
    """Factory for transactions with sensible defaults"""

    def _make(
        day: date = date(2024, 3, 1),
        amount: str = "10.00",
        type: TransactionType = TransactionType.EXPENSE,
        category: TransactionCategory = TransactionCategory.FOOD,
        custom_category: Optional[str] = None,
        description: Optional[str] = None,
        owner: str = "alice",
        id: Optional[int] = None,
    ) -> Transaction:
        return Transaction(
            date=day,
            type=type,
            amount=Decimal(amount),
            category=category,
            custom_category=custom_category,
            description=description,
            owner=owner,
            id=id,
        )

    return _make


@pytest.fixture
def sample_transactions(make_transaction) -> List[Transaction]:
    """A few months of activity, ascending by date"""
    return [
        make_transaction(date(2024, 1, 5), "2500.00", TransactionType.INCOME, TransactionCategory.SAVINGS, id=1),
        make_transaction(date(2024, 1, 6), "45.20", category=TransactionCategory.FOOD, id=2),
        make_transaction(date(2024, 1, 31), "900.00", category=TransactionCategory.RENT, id=3),
        make_transaction(date(2024, 4, 2), "30.00", category=TransactionCategory.CUSTOM, custom_category="Food", id=4),
        make_transaction(date(2024, 4, 2), "12.75", category=TransactionCategory.FOOD, id=5),
        make_transaction(date(2024, 10, 20), "150.00", TransactionType.INCOME, TransactionCategory.OTHER, id=6),
        make_transaction(date(2024, 12, 30), "60.00", category=TransactionCategory.GYM, id=7),
    ]
