"""
Service layer models - DTOs for service operations.

These models carry data into and out of the service, not domain entities.
"""
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import List, Optional

from finance_tracker.domain.enums import TransactionCategory
from finance_tracker.domain.models import Transaction


@dataclass
class TransactionInput:
    """Raw user input for a new transaction, before validation"""
    date: date
    amount: Decimal
    category: TransactionCategory
    custom_category: Optional[str] = None
    description: Optional[str] = None


@dataclass
class DeleteResult:
    """
    Result of a bulk delete.

    `matched` is what the filter selected, `deleted` what storage removed.
    """
    matched: List[Transaction] = field(default_factory=list)
    deleted: int = 0
    criteria: str = ""

    @property
    def success(self) -> bool:
        return self.deleted > 0

    def __str__(self) -> str:
        "Human-readable summary"
        if not self.matched:
            return f"No transactions matched {self.criteria}"
        return f"Deleted {self.deleted} of {len(self.matched)} transaction(s) matching {self.criteria}"
