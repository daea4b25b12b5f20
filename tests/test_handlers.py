from unittest.mock import AsyncMock, MagicMock

import pytest

from controller import ExpenseController
from errors import SchemaMismatchError, StorageIOError
from handlers.expenses import (
    add_handler,
    cancel_handler,
    chart_handler,
    delete_handler,
    edit_handler,
    handle_window_callback,
    list_handler,
    parse_expense_args,
    save_handler,
    start_handler,
)
from models import Window


def make_update(user_id: int = 1):
    update = MagicMock()
    update.effective_user.id = user_id
    update.message.reply_text = AsyncMock()
    update.message.reply_photo = AsyncMock()
    update.effective_message = update.message
    return update


def make_context(controller, *args: str):
    context = MagicMock()
    context.args = list(args)
    context.bot_data = {"controller": controller}
    return context


def replies(update) -> list[str]:
    return [call.args[0] for call in update.message.reply_text.await_args_list]


@pytest.fixture
def controller(fake_store, clock):
    return ExpenseController(fake_store, clock=clock)


def test_parse_expense_args():
    event = parse_expense_args(["12.50", "Food", "lunch", "with", "Ann"])
    assert (event.amount, event.category, event.note) == ("12.50", "Food", "lunch with Ann")
    assert parse_expense_args([]).amount == ""
    assert parse_expense_args(["5"]).category == ""


async def test_start_lists_commands(controller):
    update = make_update()
    await start_handler(update, make_context(controller))
    assert "/add" in replies(update)[0]


async def test_add_stores_expense_and_shows_summary(controller, fake_store):
    update = make_update()
    await add_handler(update, make_context(controller, "12.50", "Food", "lunch", "out"))

    text = replies(update)
    assert text[0] == "✅ Expense added."
    assert "Total Spending (All): $12.50" in text[1]
    (record,) = fake_store.rows.values()
    assert record.note == "lunch out"


async def test_add_reports_validation_reason(controller, fake_store):
    update = make_update()
    await add_handler(update, make_context(controller, "-4", "Food"))

    assert replies(update) == ["❌ Amount must be greater than zero"]
    assert fake_store.rows == {}


async def test_add_while_editing_asks_to_save_first(controller, fake_store):
    expense_id = await fake_store.create(5.0, "Food", None, "2024-03-10")
    await edit_handler(make_update(), make_context(controller, str(expense_id)))

    update = make_update()
    await add_handler(update, make_context(controller, "3", "Fun"))

    assert "/save" in replies(update)[0]
    assert len(fake_store.rows) == 1


async def test_edit_then_save_updates_expense(controller, fake_store):
    expense_id = await fake_store.create(5.0, "Food", "snack", "2024-03-10")

    update = make_update()
    await edit_handler(update, make_context(controller, str(expense_id)))
    assert "Amount: 5" in replies(update)[0]
    assert "Note: snack" in replies(update)[0]

    update = make_update()
    await save_handler(update, make_context(controller, "6.5", "Groceries"))
    assert replies(update)[0] == "✅ Expense updated."
    record = fake_store.rows[expense_id]
    assert (record.amount, record.category, record.date) == (6.5, "Groceries", "2024-03-10")
    assert not controller.state.is_editing


@pytest.mark.parametrize("handler", [edit_handler, delete_handler])
@pytest.mark.parametrize("args", [(), ("abc",), ("1", "2")])
async def test_id_commands_validate_usage(controller, handler, args):
    update = make_update()
    await handler(update, make_context(controller, *args))
    assert replies(update)[0].startswith("Usage:")


async def test_edit_unknown_id(controller):
    update = make_update()
    await edit_handler(update, make_context(controller, "9"))
    assert replies(update) == ["❌ Expense 9 not found"]


async def test_save_and_cancel_need_a_selection(controller):
    update = make_update()
    await save_handler(update, make_context(controller, "5", "Food"))
    await cancel_handler(update, make_context(controller))
    assert replies(update)[0].startswith("Nothing to save")
    assert replies(update)[1] == "Nothing to cancel."


async def test_cancel_leaves_expense_untouched(controller, fake_store):
    expense_id = await fake_store.create(5.0, "Food", None, "2024-03-10")
    await edit_handler(make_update(), make_context(controller, str(expense_id)))

    update = make_update()
    await cancel_handler(update, make_context(controller))

    assert replies(update) == ["Editing canceled."]
    assert not controller.state.is_editing
    assert fake_store.rows[expense_id].amount == 5.0


async def test_delete_removes_expense(controller, fake_store):
    expense_id = await fake_store.create(5.0, "Food", None, "2024-03-10")

    update = make_update()
    await delete_handler(update, make_context(controller, str(expense_id)))

    assert replies(update)[0] == "🗑 Expense deleted."
    assert "No expenses yet." in replies(update)[1]
    assert fake_store.rows == {}


async def test_list_reports_storage_errors(controller, fake_store):
    fake_store.fail_with = StorageIOError("disk I/O error")
    update = make_update()
    await list_handler(update, make_context(controller))
    assert replies(update) == ["❌ Error loading expenses. Please try again."]


async def test_list_reports_schema_mismatch_distinctly(controller, fake_store):
    fake_store.fail_with = SchemaMismatchError("no such column: date")
    update = make_update()
    await list_handler(update, make_context(controller))
    assert "reset" in replies(update)[0]


async def test_window_callback_switches_window(controller, fake_store):
    await fake_store.create(5.0, "Food", None, "2024-03-10")
    await fake_store.create(8.0, "Fun", None, "2024-02-01")
    await list_handler(make_update(), make_context(controller))

    update = MagicMock()
    update.callback_query.data = "window:WEEK"
    update.callback_query.from_user.id = 1
    update.callback_query.answer = AsyncMock()
    update.callback_query.edit_message_text = AsyncMock()

    await handle_window_callback(update, make_context(controller))

    update.callback_query.answer.assert_awaited_once()
    text = update.callback_query.edit_message_text.await_args.args[0]
    assert "Total Spending (This Week): $5.00" in text
    assert controller.state.window is Window.WEEK


async def test_chart_without_expenses(controller):
    update = make_update()
    await chart_handler(update, make_context(controller))
    assert replies(update) == ["📭 There are no expenses to chart"]
    update.message.reply_photo.assert_not_awaited()


async def test_chart_sends_photo(controller, fake_store):
    await fake_store.create(5.0, "Food", None, "2024-03-10")
    update = make_update()
    await chart_handler(update, make_context(controller))

    update.message.reply_photo.assert_awaited_once()
    caption = update.message.reply_photo.await_args.kwargs["caption"]
    assert "Food: $5.00" in caption
