import traceback

from telegram import BotCommand
from telegram.ext import Application, CallbackQueryHandler, CommandHandler, ContextTypes

from config import require_bot_token
from constants import BOT_COMMANDS
from controller import ExpenseController, Load
from db import db
from errors import StorageError
from handlers.common import store_error_message
from handlers.expenses import (
    add_handler,
    cancel_handler,
    chart_handler,
    delete_handler,
    edit_handler,
    handle_window_callback,
    list_handler,
    save_handler,
    start_handler,
)
from utils.logging import logger


async def post_init(application: Application) -> None:
    """Initialize bot commands, the expense store and the session controller."""
    logger.info("Setting up bot commands")
    commands = [
        BotCommand(cmd_info["command"], cmd_info["description"])
        for cmd_info in BOT_COMMANDS.values()
        if cmd_info["command"] != "start"
    ]
    await application.bot.set_my_commands(commands)
    logger.info("Bot commands configured successfully")

    # Fails fast with SchemaMismatchError on a pre-upgrade database
    logger.info("Initializing database")
    await db.initialize()

    controller = ExpenseController(db)
    await controller.dispatch(Load())
    application.bot_data["controller"] = controller


async def shutdown(_: Application) -> None:
    """Close database connection when shutting down."""
    logger.info("Closing database connection")
    await db.close()


async def error_handler(update: object, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle errors in the dispatcher."""
    logger.error(f"Exception while handling an update: {context.error}")

    tb_list = traceback.format_exception(None, context.error, context.error.__traceback__)
    tb_string = "".join(tb_list)
    logger.error(f"Exception traceback:\n{tb_string}")

    if isinstance(context.error, StorageError):
        text = store_error_message("handling your request", context.error)
    else:
        text = "❌ Sorry, something went wrong. The error has been logged."

    if update and hasattr(update, "effective_message") and update.effective_message:
        await update.effective_message.reply_text(text)

    # If it's a callback query, we need to answer it to clear the loading state
    if update and hasattr(update, "callback_query") and update.callback_query:
        try:
            await update.callback_query.answer("An error occurred. Please try again.")
        except Exception as e:
            logger.error(f"Failed to answer callback query: {e}")


def build_application(token: str) -> Application:
    """Build the bot application with every handler registered."""
    logger.info("Building application")
    app = Application.builder().token(token).post_init(post_init).post_shutdown(shutdown).build()

    handlers = [
        CommandHandler(BOT_COMMANDS["start"]["command"], start_handler),
        CommandHandler(BOT_COMMANDS["add"]["command"], add_handler),
        CommandHandler(BOT_COMMANDS["list"]["command"], list_handler),
        CommandHandler(BOT_COMMANDS["edit"]["command"], edit_handler),
        CommandHandler(BOT_COMMANDS["save"]["command"], save_handler),
        CommandHandler(BOT_COMMANDS["cancel"]["command"], cancel_handler),
        CommandHandler(BOT_COMMANDS["delete"]["command"], delete_handler),
        CommandHandler(BOT_COMMANDS["chart"]["command"], chart_handler),
        CallbackQueryHandler(handle_window_callback, pattern=r"^window:(ALL|WEEK|MONTH)$"),
    ]

    logger.info("Registering command handlers")
    for handler in handlers:
        app.add_handler(handler)
    app.add_error_handler(error_handler)
    logger.info("All handlers registered successfully")
    return app


def main() -> None:
    logger.info("Starting Expense Tracker Bot")
    app = build_application(require_bot_token())
    logger.info("Starting bot polling")
    app.run_polling()


if __name__ == "__main__":
    main()
