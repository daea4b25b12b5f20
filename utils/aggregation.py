"""Totals over a set of expenses."""

from typing import Iterable

from constants import UNCATEGORIZED
from models import CategoryTotals, Expense


def aggregate(records: Iterable[Expense]) -> CategoryTotals:
    """Sum the amounts of ``records`` overall and per category.

    Categories keep the order in which they first appear in ``records``.
    A record without a category is counted under ``UNCATEGORIZED``.
    """
    total = 0
    by_category: dict[str, float] = {}
    for record in records:
        amount = record.amount or 0
        category = record.category or UNCATEGORIZED
        total += amount
        by_category[category] = by_category.get(category, 0) + amount
    return CategoryTotals(total=total, by_category=by_category)
