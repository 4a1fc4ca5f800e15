import re
from dataclasses import dataclass
from datetime import date
from decimal import Decimal, InvalidOperation
from typing import Optional, Union

from finance_tracker.domain.enums import TransactionCategory, TransactionType

MAX_DESCRIPTION_LENGTH = 40
MAX_CUSTOM_CATEGORY_LENGTH = 15
DEFAULT_DESCRIPTION = "N/A"

_CUSTOM_LABEL_PATTERN = re.compile(r"^[A-Za-z0-9 _-]+$")
_CENTS = Decimal("0.01")


class InvalidTransactionError(ValueError):
    """Raised when transaction data violates the domain rules."""
    pass


@dataclass(frozen=True)
class CustomCategory:
    """
    A user-supplied category label.

    Wrapping the label keeps custom categories apart from the fixed
    TransactionCategory members when used as dictionary keys, so a custom
    "Food" never merges with TransactionCategory.FOOD.
    """
    label: str

    def __str__(self) -> str:
        return self.label


CategoryKey = Union[TransactionCategory, CustomCategory]


def validate_custom_label(label: Optional[str]) -> str:
    """
    Check a custom category label and return it stripped.

    Raises:
        InvalidTransactionError: If the label is empty, too long or has
            characters other than letters, digits, space, hyphen or underscore
    """
    cleaned = (label or "").strip()
    if not cleaned:
        raise InvalidTransactionError("A custom category needs a label")
    if len(cleaned) > MAX_CUSTOM_CATEGORY_LENGTH:
        raise InvalidTransactionError(
            f"A custom category cannot be longer than {MAX_CUSTOM_CATEGORY_LENGTH} characters"
        )
    if not _CUSTOM_LABEL_PATTERN.match(cleaned):
        raise InvalidTransactionError(
            "A custom category may only contain letters, digits, spaces, '-' and '_'"
        )
    return cleaned


@dataclass(frozen=True)
class Transaction:
    """Core domain model representing a single income or expense"""
    date: date
    type: TransactionType
    amount: Decimal
    category: TransactionCategory
    owner: str
    custom_category: Optional[str] = None
    description: Optional[str] = DEFAULT_DESCRIPTION
    id: Optional[int] = None

    def __post_init__(self):
        """Normalize fields and enforce the category/label invariant"""
        try:
            object.__setattr__(self, "type", TransactionType(self.type))
        except ValueError:
            raise InvalidTransactionError(f"Unknown transaction type: {self.type!r}")
        try:
            object.__setattr__(self, "category", TransactionCategory(self.category))
        except ValueError:
            raise InvalidTransactionError(f"Unknown category: {self.category!r}")

        try:
            amount = Decimal(str(self.amount))
            if not amount.is_finite():
                raise InvalidOperation
            amount = amount.quantize(_CENTS)
        except InvalidOperation:
            raise InvalidTransactionError(f"Invalid amount: {self.amount!r}")
        if amount < 0:
            raise InvalidTransactionError("Amount cannot be negative")
        object.__setattr__(self, "amount", amount)

        if self.category == TransactionCategory.CUSTOM:
            object.__setattr__(
                self, "custom_category", validate_custom_label(self.custom_category)
            )
        elif self.custom_category:
            raise InvalidTransactionError(
                f"Only custom categories carry a label, got '{self.custom_category}' "
                f"for {self.category.value}"
            )
        else:
            object.__setattr__(self, "custom_category", None)

        description = (self.description or "").strip()
        if not description:
            description = DEFAULT_DESCRIPTION
        if len(description) > MAX_DESCRIPTION_LENGTH:
            raise InvalidTransactionError(
                f"Description cannot be longer than {MAX_DESCRIPTION_LENGTH} characters"
            )
        if any(not ch.isprintable() for ch in description):
            raise InvalidTransactionError("Description contains invalid characters")
        object.__setattr__(self, "description", description)

    @property
    def is_income(self) -> bool:
        return self.type == TransactionType.INCOME

    @property
    def signed_amount(self) -> Decimal:
        """Return amount with sign for net calculations"""
        return self.amount if self.is_income else -self.amount

    @property
    def category_key(self) -> CategoryKey:
        """Key used when aggregating by category"""
        if self.category == TransactionCategory.CUSTOM:
            return CustomCategory(self.custom_category)
        return self.category

    @property
    def category_label(self) -> str:
        return self.custom_category if self.custom_category else self.category.value

    def __repr__(self):
        sign = "+" if self.is_income else "-"
        return f"Transaction({self.date}, {self.category_label}, {self.description[:30]}, {sign}${self.amount})"
