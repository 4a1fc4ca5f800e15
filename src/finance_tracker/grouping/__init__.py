"""
Transaction grouping and summarization.

Pure functions over lists of transactions, no I/O and no shared state.

Quick Start:
    >>> from finance_tracker.grouping import group, aggregate_by_category
    >>>
    >>> summary = group(transactions, "Month")
    >>> print(summary.net_result)
    >>> by_category = aggregate_by_category(transactions)
"""
from finance_tracker.domain.enums import InvalidTimeUnitError, TimeUnit
from finance_tracker.grouping.grouper import aggregate_by_category, group
from finance_tracker.grouping.keys import key_of, sort_key_of
from finance_tracker.grouping.models import Bucket, CategoryTotals, Summary

__all__ = [
    "group",
    "aggregate_by_category",
    "key_of",
    "sort_key_of",
    "Bucket",
    "CategoryTotals",
    "Summary",
    "TimeUnit",
    "InvalidTimeUnitError",
]
