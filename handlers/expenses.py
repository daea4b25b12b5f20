"""Chat commands for adding, editing, deleting and summarizing expenses."""

from telegram import Update
from telegram.ext import ContextTypes

from constants import BOT_USAGE_INSTRUCTIONS
from controller import Cancel, ChooseWindow, Delete, ExpenseState, Load, Select, Submit
from errors import StorageError
from handlers.common import get_controller, handle_store_error, log_user_action
from models import Window
from utils.plotting import ChartError, generate_category_chart
from utils.ui_helpers import build_window_keyboard, format_overview, format_summary


def parse_expense_args(args: list[str]) -> Submit:
    """Split '<amount> <category> [note...]' into a Submit event.

    Missing parts are passed on as empty text so the validator reports them.
    """
    amount = args[0] if args else ""
    category = args[1] if len(args) > 1 else ""
    note = " ".join(args[2:])
    return Submit(amount=amount, category=category, note=note)


def parse_expense_id(args: list[str]) -> int | None:
    if len(args) != 1 or not args[0].isdigit():
        return None
    return int(args[0])


async def reply_with_overview(update: Update, state: ExpenseState) -> None:
    await update.effective_message.reply_text(
        format_overview(state.summary, state.editing_id),
        reply_markup=build_window_keyboard(state.window),
    )


async def start_handler(update: Update, _: ContextTypes.DEFAULT_TYPE) -> None:
    log_user_action(update.effective_user.id, "started the bot")
    await update.message.reply_text(
        f"👋 Welcome to the Expense Tracker Bot!\n{BOT_USAGE_INSTRUCTIONS}"
    )


async def list_handler(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle the /list command."""
    log_user_action(update.effective_user.id, "requested the expense list")
    try:
        state = await get_controller(context).dispatch(Load())
    except StorageError as e:
        await handle_store_error(update, "loading expenses", e)
        return
    await reply_with_overview(update, state)


async def handle_window_callback(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle the All / This Week / This Month buttons."""
    query = update.callback_query
    await query.answer()

    window = Window(query.data.split(":", 1)[1])
    log_user_action(query.from_user.id, f"selected window {window.value}")
    state = await get_controller(context).dispatch(ChooseWindow(window))
    await query.edit_message_text(
        format_overview(state.summary, state.editing_id),
        reply_markup=build_window_keyboard(state.window),
    )


async def add_handler(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /add <amount> <category> [note]."""
    user_id = update.effective_user.id
    controller = get_controller(context)
    if controller.state.is_editing:
        await update.message.reply_text(
            f"✏️ You are editing expense #{controller.state.editing_id}. "
            "Use /save to store it or /cancel to drop the changes."
        )
        return

    log_user_action(user_id, "is adding an expense")
    await _submit(update, context, "adding expense", "✅ Expense added.")


async def edit_handler(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /edit <id>."""
    expense_id = parse_expense_id(context.args)
    if expense_id is None:
        await update.message.reply_text("Usage: /edit <expense_id>")
        return

    log_user_action(update.effective_user.id, f"selected expense {expense_id} for editing")
    controller = get_controller(context)
    try:
        await controller.dispatch(Load())
    except StorageError as e:
        await handle_store_error(update, "loading expenses", e)
        return

    state = await controller.dispatch(Select(expense_id))
    if state.error is not None:
        await update.message.reply_text(f"❌ {state.error}")
        return

    form = state.form
    await update.message.reply_text(
        f"✏️ Editing expense #{expense_id}\n"
        f"Amount: {form.amount}\n"
        f"Category: {form.category}\n"
        f"Note: {form.note or 'None'}\n\n"
        "Send /save <amount> <category> [note] or /cancel."
    )


async def save_handler(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /save <amount> <category> [note] while an expense is selected."""
    controller = get_controller(context)
    if not controller.state.is_editing:
        await update.message.reply_text("Nothing to save. Select an expense with /edit <id> first.")
        return

    log_user_action(update.effective_user.id, f"is saving expense {controller.state.editing_id}")
    await _submit(update, context, "saving expense", "✅ Expense updated.")


async def cancel_handler(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    controller = get_controller(context)
    if not controller.state.is_editing:
        await update.message.reply_text("Nothing to cancel.")
        return

    log_user_action(update.effective_user.id, "canceled editing")
    await controller.dispatch(Cancel())
    await update.message.reply_text("Editing canceled.")


async def delete_handler(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /delete <id>."""
    expense_id = parse_expense_id(context.args)
    if expense_id is None:
        await update.message.reply_text("Usage: /delete <expense_id>")
        return

    log_user_action(update.effective_user.id, f"is deleting expense {expense_id}")
    try:
        state = await get_controller(context).dispatch(Delete(expense_id))
    except StorageError as e:
        await handle_store_error(update, "deleting expense", e)
        return

    await update.message.reply_text("🗑 Expense deleted.")
    await reply_with_overview(update, state)


async def chart_handler(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Send a pie chart of spending per category for the active window."""
    log_user_action(update.effective_user.id, "requested a category chart")
    try:
        state = await get_controller(context).dispatch(Load())
    except StorageError as e:
        await handle_store_error(update, "loading expenses", e)
        return

    try:
        buffer = generate_category_chart(state.summary)
    except ChartError as ce:
        await update.message.reply_text(f"📭 {ce}")
        return

    await update.message.reply_photo(photo=buffer, caption=format_summary(state.summary))
    buffer.close()


async def _submit(
    update: Update, context: ContextTypes.DEFAULT_TYPE, action: str, success_text: str
) -> None:
    try:
        state = await get_controller(context).dispatch(parse_expense_args(context.args))
    except StorageError as e:
        await handle_store_error(update, action, e)
        return

    if state.error is not None:
        await update.message.reply_text(f"❌ {state.error}")
        return

    await update.message.reply_text(success_text)
    await reply_with_overview(update, state)
