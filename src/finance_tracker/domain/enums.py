from enum import Enum
from typing import Union


class InvalidTimeUnitError(ValueError):
    """Raised when a grouping is requested for an unknown time unit."""
    pass


class TransactionType(Enum):
    """Represents whether money is coming in or out"""
    INCOME = "Income" # in
    EXPENSE = "Expense" # out


class TransactionCategory(Enum):
    """Fixed set of categories a transaction can be filed under"""
    RENT = "Rent"
    FOOD = "Food"
    GYM = "Gym"
    UTILITIES = "Utilities"
    LOAN = "Loan"
    CLOTHING = "Clothing"
    INSURANCE = "Insurance"
    SAVINGS = "Savings"
    ENTERTAINMENT = "Entertainment"
    HEALTHCARE = "Healthcare"
    SUPPLIES = "Supplies"
    OTHER = "Other"
    TRANSPORTATION = "Transportation"
    EDUCATION = "Education"
    CUSTOM = "Custom"

    @classmethod
    def parse(cls, name: str) -> "TransactionCategory":
        """
        Resolve a category from its display name, ignoring case.

        Raises:
            ValueError: If no category has that name
        """
        cleaned = name.strip().lower()
        for category in cls:
            if category.value.lower() == cleaned:
                return category
        raise ValueError(f"Unknown category: '{name}'")


class TimeUnit(Enum):
    """Granularity used when grouping transactions by date"""
    DAY = "Day"
    WEEK = "Week"
    MONTH = "Month"
    YEAR = "Year"

    @classmethod
    def parse(cls, value: Union["TimeUnit", str]) -> "TimeUnit":
        """
        Accept a TimeUnit or its name (any case).

        Raises:
            InvalidTimeUnitError: For anything that isn't one of the four units
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            cleaned = value.strip().lower()
            for unit in cls:
                if unit.value.lower() == cleaned:
                    return unit
        raise InvalidTimeUnitError(
            f"Invalid time unit: {value!r}. "
            f"Expected one of: {', '.join(u.value for u in cls)}"
        )
