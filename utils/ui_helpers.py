"""UI/message formatting helpers for the expense tracker bot."""

from telegram import InlineKeyboardButton, InlineKeyboardMarkup

from models import Expense, Summary, Window
from utils.logging import logger


def format_money(amount: float) -> str:
    return f"${amount:.2f}"


def format_expense_line(expense: Expense) -> str:
    """Format a single expense for the list view."""
    line = f"#{expense.id} {expense.date} | {format_money(expense.amount)} | {expense.category}"
    if expense.note:
        # Truncate long notes
        truncated = expense.note[:30] + ("..." if len(expense.note) > 30 else "")
        line += f" | {truncated}"
    return line


def format_expense_list(records: list[Expense]) -> str:
    if not records:
        return "No expenses yet."
    return "\n".join(format_expense_line(expense) for expense in records)


def format_summary(summary: Summary) -> str:
    """Format the total and per-category breakdown of a summary."""
    logger.debug(f"Formatting summary for window {summary.window.value}")
    lines = [
        f"Total Spending ({summary.window.label}): {format_money(summary.total)}",
        "",
        "By Category:",
    ]
    if summary.is_empty:
        lines.append("No expenses for this range.")
    else:
        lines.extend(f"{cat}: {format_money(total)}" for cat, total in summary.by_category.items())
    return "\n".join(lines)


def format_overview(summary: Summary, editing_id: int | None = None) -> str:
    """Summary followed by the filtered expenses, as sent for /list."""
    parts = [format_summary(summary), "", format_expense_list(summary.records)]
    if editing_id is not None:
        parts.append("")
        parts.append(f"✏️ Editing expense #{editing_id}. Use /save or /cancel.")
    return "\n".join(parts)


def build_window_keyboard(active: Window) -> InlineKeyboardMarkup:
    """Create the All / This Week / This Month selector, marking the active one."""
    buttons = [
        InlineKeyboardButton(
            f"• {window.label}" if window is active else window.label,
            callback_data=f"window:{window.value}",
        )
        for window in Window
    ]
    return InlineKeyboardMarkup([buttons])
