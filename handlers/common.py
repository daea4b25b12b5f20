"""Common utilities for handler functionality."""

from telegram import Update
from telegram.ext import ContextTypes

from controller import ExpenseController
from errors import SchemaMismatchError, StorageError
from utils.logging import logger


def get_controller(context: ContextTypes.DEFAULT_TYPE) -> ExpenseController:
    """Return the session controller created at startup."""
    return context.bot_data["controller"]


def log_user_action(user_id: int, action: str) -> None:
    """Log a user action with standardized format.

    Args:
        user_id: The user's Telegram ID
        action: Description of the action being performed
    """
    logger.info(f"User {user_id} {action}")


def store_error_message(action: str, error: StorageError) -> str:
    if isinstance(error, SchemaMismatchError):
        return (
            f"❌ Error {action}: the expense database has an outdated layout. "
            "The store must be reset by the operator."
        )
    return f"❌ Error {action}. Please try again."


async def handle_store_error(update: Update, action: str, error: StorageError) -> None:
    """Handle store errors with standardized responses.

    Args:
        update: Telegram update object
        action: Description of the action that failed
        error: The exception that was raised
    """
    logger.error(f"Error {action} ({error.kind}): {error}")
    await update.effective_message.reply_text(store_error_message(action, error))
