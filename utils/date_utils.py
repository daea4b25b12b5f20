"""Utility functions for date handling and window classification."""

import re
from datetime import date, datetime, time, timedelta

from constants import DATE_FORMAT
from models import Window
from utils.logging import logger

STORED_DATE_PATTERN = re.compile(r"^[0-9]{4}-[0-9]{2}-[0-9]{2}$")
END_OF_DAY = time(23, 59, 59, 999000)


def today_string(now: datetime | date | None = None) -> str:
    """Return the local calendar day as a YYYY-MM-DD string.

    Args:
        now: Optional moment to format instead of the current local time

    Returns:
        Zero-padded date string used for new expense records
    """
    now = now or datetime.now()
    return now.strftime(DATE_FORMAT)


def parse_record_date(value) -> date | None:
    """Parse a stored expense date.

    Only the exact zero-padded ``YYYY-MM-DD`` form is accepted. Anything
    else, including impossible calendar dates, yields ``None`` instead of
    raising so that a bad row can never break a summary.

    Args:
        value: A ``date``, a date string, or whatever the row happened to hold

    Returns:
        The calendar date, or ``None`` when the value is missing or malformed
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str) or not STORED_DATE_PATTERN.match(value):
        logger.debug(f"Ignoring malformed expense date: {value!r}")
        return None

    try:
        return datetime.strptime(value, DATE_FORMAT).date()
    except ValueError:
        logger.debug(f"Ignoring impossible expense date: {value!r}")
        return None


def _calendar_day(reference: datetime | date) -> date:
    if isinstance(reference, datetime):
        return reference.date()
    return reference


def week_bounds(reference: datetime | date) -> tuple[datetime, datetime]:
    """Return the Sunday-to-Saturday week containing ``reference``.

    Returns:
        Tuple of (start of Sunday at 00:00, end of Saturday at 23:59:59.999)
    """
    day = _calendar_day(reference)
    # isoweekday: Monday=1 ... Sunday=7, so Sunday maps to 0 days back
    start = day - timedelta(days=day.isoweekday() % 7)
    end = start + timedelta(days=6)
    return datetime.combine(start, time.min), datetime.combine(end, END_OF_DAY)


def in_window(record_date, window: Window, reference_now: datetime | date) -> bool:
    """Check whether an expense date falls into the given window.

    Args:
        record_date: Stored date of the expense (string or date)
        window: ALL, WEEK or MONTH
        reference_now: The moment the window is relative to

    Returns:
        True if the expense belongs to the window
    """
    window = Window(window)
    if window is Window.ALL:
        return True

    day = parse_record_date(record_date)
    if day is None:
        return False

    reference = _calendar_day(reference_now)

    if window is Window.MONTH:
        return day.year == reference.year and day.month == reference.month

    start_of_week, end_of_week = week_bounds(reference)
    record_midnight = datetime.combine(day, time.min)
    return start_of_week <= record_midnight <= end_of_week
