import os

from dotenv import load_dotenv

from utils.logging import logger


logger.info("Loading environment variables")
load_dotenv()

DB_PATH = os.getenv("EXPENSES_DB_PATH", "expenses.db")
BOT_TOKEN = os.getenv("BOT_TOKEN")

logger.info(f"Configuration loaded successfully (database: {DB_PATH})")


def require_bot_token() -> str:
    """Return the bot token or fail when the front end cannot start without it."""
    if not BOT_TOKEN:
        logger.error("BOT_TOKEN not found in environment variables")
        raise ValueError("BOT_TOKEN environment variable is required")
    return BOT_TOKEN
