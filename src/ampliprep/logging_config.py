import logging
import logging.handlers
from pathlib import Path

from rich.logging import RichHandler

# Formatting
FORMAT = "%(levelname)s\t[%(asctime)s]\t[%(filename)s:%(lineno)d]\t%(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
formatter = logging.Formatter(FORMAT, DATE_FORMAT)

# Configure logger
logger = logging.getLogger()
logger.setLevel(logging.INFO)


# Function to get file handler
def get_log_file_handler(log_file: Path) -> logging.Handler:
    # Create new log file every monday
    file_handler = logging.handlers.TimedRotatingFileHandler(log_file, when="W0", backupCount=8)
    file_handler.setFormatter(formatter)
    return file_handler


# Function to set console handler (only once per logger)
def set_console_handler(ll: logging.Logger) -> None:
    if any(isinstance(handler, RichHandler) for handler in ll.handlers):
        return

    # Level and time columns are rendered by rich
    console_handler = RichHandler(show_path=False, log_time_format=f"[{DATE_FORMAT}]")
    console_handler.setFormatter(logging.Formatter("%(message)s"))
    ll.addHandler(console_handler)
