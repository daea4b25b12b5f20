import logging
import os
from datetime import datetime
from logging.handlers import RotatingFileHandler

# LOG_DIR is read straight from the process environment: this module is
# imported before config.py has loaded the .env file
LOG_DIR = os.getenv("LOG_DIR", "logs")
LOG_FILE_MAX_BYTES = 5 * 1024 * 1024
LOG_FILE_BACKUPS = 5

logger = logging.getLogger("expense_tracker")
logger.setLevel(logging.DEBUG)


def _build_console_handler() -> logging.Handler:
    """Warnings and errors for whoever runs the bot in a terminal."""
    handler = logging.StreamHandler()
    handler.setLevel(logging.WARNING)
    handler.setFormatter(logging.Formatter("%(asctime)s - %(levelname)s - %(message)s"))
    return handler


def _build_file_handler(log_dir: str) -> logging.Handler:
    """Full debug trail of store calls, validation and window filtering, one file per day."""
    os.makedirs(log_dir, exist_ok=True)
    log_file = os.path.join(log_dir, f"expense_tracker_{datetime.now().strftime('%Y%m%d')}.log")
    handler = RotatingFileHandler(
        log_file, maxBytes=LOG_FILE_MAX_BYTES, backupCount=LOG_FILE_BACKUPS
    )
    handler.setLevel(logging.DEBUG)
    handler.setFormatter(
        logging.Formatter("%(asctime)s - %(levelname)s - [%(filename)s:%(lineno)d] - %(message)s")
    )
    return handler


# Importing the module twice (e.g. under a test runner) must not duplicate output
if not logger.handlers:
    logger.addHandler(_build_console_handler())
    logger.addHandler(_build_file_handler(LOG_DIR))
    logger.info(f"Logger initialized, writing to {LOG_DIR}")
