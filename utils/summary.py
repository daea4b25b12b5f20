"""Window filtering combined with aggregation."""

from datetime import date, datetime
from typing import Iterable

from models import Expense, Summary, Window
from utils.aggregation import aggregate
from utils.date_utils import in_window
from utils.logging import logger


def filter_expenses(
    records: Iterable[Expense], window: Window, reference_now: datetime | date
) -> list[Expense]:
    """Return the records that fall into ``window``, keeping their order."""
    return [record for record in records if in_window(record.date, window, reference_now)]


def summarize(
    all_records: Iterable[Expense], window: Window, reference_now: datetime | date
) -> Summary:
    """Build the view-ready summary of one window.

    Args:
        all_records: Every expense, in store order
        window: The window to summarize
        reference_now: The moment WEEK and MONTH are relative to

    Returns:
        Summary with the filtered records, their total and per-category totals
    """
    window = Window(window)
    filtered = filter_expenses(all_records, window, reference_now)
    totals = aggregate(filtered)
    logger.debug(
        f"Summarized {len(filtered)} expenses for window {window.value}: total {totals.total}"
    )
    return Summary(
        window=window,
        records=filtered,
        total=totals.total,
        by_category=totals.by_category,
    )
