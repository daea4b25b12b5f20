"""Validation utilities for user input."""

import math
import re

from errors import InvalidAmountError, MissingCategoryError
from models import ExpenseInput
from utils.logging import logger

AMOUNT_PATTERN = re.compile(r"^[+-]?([0-9]+(\.[0-9]*)?|\.[0-9]+)$")


def validate_amount(amount_str: str | None) -> tuple[bool, float | str]:
    """
    Validate an amount string and convert to float if valid.

    Args:
        amount_str: The amount string to validate

    Returns:
        Tuple of (is_valid, amount_or_error_message)
    """
    if amount_str is None or not str(amount_str).strip():
        logger.debug("Empty amount validation failed")
        return False, "Amount cannot be empty"

    # Remove any whitespace and allow commas as decimal separators
    amount_str = str(amount_str).strip().replace(",", ".")

    if not AMOUNT_PATTERN.match(amount_str):
        logger.debug(f"Amount validation failed: '{amount_str}' does not match number pattern")
        return False, "Amount must be a valid number (e.g., 10, 10.50)"

    amount = float(amount_str)
    if not math.isfinite(amount) or amount <= 0:
        logger.debug(f"Amount validation failed: '{amount}' is not positive")
        return False, "Amount must be greater than zero"

    logger.debug(f"Amount '{amount}' validated successfully")
    return True, amount


def validate_category(category: str | None) -> tuple[bool, str]:
    """
    Validate a category name.

    Casing is kept as typed, so "Food" and "food" stay different categories.

    Args:
        category: The category to validate

    Returns:
        Tuple of (is_valid, trimmed_category_or_error_message)
    """
    category = (category or "").strip()
    if not category:
        logger.debug("Empty category validation failed")
        return False, "Category cannot be empty"

    logger.debug(f"Category '{category}' validated successfully")
    return True, category


def normalize_note(note: str | None) -> str | None:
    """Trim a note; blank notes are stored as absent."""
    note = (note or "").strip()
    return note or None


def validate_expense(
    amount_text: str | None, category_text: str | None, note_text: str | None = None
) -> ExpenseInput:
    """Validate raw form input for an expense.

    Args:
        amount_text: Amount as typed by the user
        category_text: Category as typed by the user
        note_text: Optional note as typed by the user

    Returns:
        ExpenseInput with the parsed amount, trimmed category and normalized note

    Raises:
        InvalidAmountError: If the amount is not a number or not positive
        MissingCategoryError: If the category is blank
    """
    amount_ok, amount = validate_amount(amount_text)
    if not amount_ok:
        raise InvalidAmountError(amount)

    category_ok, category = validate_category(category_text)
    if not category_ok:
        raise MissingCategoryError(category)

    return ExpenseInput(amount=amount, category=category, note=normalize_note(note_text))
