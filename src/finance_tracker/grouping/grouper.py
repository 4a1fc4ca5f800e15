from typing import Dict, Iterable, Union

from finance_tracker.domain.enums import TimeUnit, TransactionCategory
from finance_tracker.domain.models import CategoryKey, Transaction
from finance_tracker.grouping.keys import key_of, sort_key_of
from finance_tracker.grouping.models import Bucket, CategoryTotals, Summary, ZERO
from finance_tracker.logging_setup import get_logger

logger = get_logger("finance_tracker.grouping.grouper")


def group(
    transactions: Iterable[Transaction],
    time_unit: Union[TimeUnit, str],
) -> Summary:
    """
    Group transactions into time-period buckets.

    Single pass over the input: every transaction lands in the bucket of
    its derived key, keeping the caller's order inside a bucket, while
    income and expense totals are accumulated globally and per bucket.
    Buckets come out in chronological order.

    Args:
        transactions: Transactions to group, conventionally ascending by date
        time_unit: Day, Week, Month or Year (enum or name)

    Returns:
        A Summary. Empty input gives a Summary with no buckets and zero totals.

    Raises:
        InvalidTimeUnitError: If time_unit is not a recognized unit

    Example:
        ```
        summary = group(transactions, TimeUnit.MONTH)
        for bucket in summary.buckets:
            print(bucket.key, bucket.net_result)
        ```
    """
    unit = TimeUnit.parse(time_unit)

    buckets: Dict[str, Bucket] = {}
    total_income = ZERO
    total_expense = ZERO

    for txn in transactions:
        key = key_of(txn.date, unit)
        bucket = buckets.get(key)
        if bucket is None:
            bucket = buckets[key] = Bucket(key=key, sort_key=sort_key_of(txn.date, unit))
        bucket.add(txn)

        if txn.is_income:
            total_income += txn.amount
        else:
            total_expense += txn.amount

    ordered = sorted(buckets.values(), key=lambda b: b.sort_key)
    logger.debug("Grouped into %d %s bucket(s)", len(ordered), unit.value)

    return Summary(
        time_unit=unit,
        buckets=ordered,
        total_income=total_income,
        total_expense=total_expense,
        net_result=total_income - total_expense,
    )


def aggregate_by_category(
    transactions: Iterable[Transaction],
) -> Dict[CategoryKey, CategoryTotals]:
    """
    Income and expense subtotals per category.

    Custom categories are keyed by CustomCategory(label) and fixed ones by
    the TransactionCategory member, so a custom label that reads like a
    fixed category name stays a separate entry.

    Returns:
        Mapping in order of first appearance
    """
    totals: Dict[CategoryKey, CategoryTotals] = {}

    for txn in transactions:
        assert txn.category != TransactionCategory.CUSTOM or txn.custom_category, (
            f"Custom category without a label: {txn!r}"
        )
        key = txn.category_key
        if key not in totals:
            totals[key] = CategoryTotals()
        totals[key].add(txn)

    return totals
