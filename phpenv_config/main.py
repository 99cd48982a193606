import sys
import logging
import logging.handlers
from pathlib import Path
from typing import List, Optional, Union

from phpenv_config.core import config
from phpenv_config import cli


# --- Custom Log Formatter for Colors ---
class ColorLogFormatter(logging.Formatter):
    """Colors WARNING and above on the console; lower levels are printed plain."""

    YELLOW = "\x1b[33;20m"
    RED = "\x1b[31;20m"
    BOLD_RED = "\x1b[31;1m"
    RESET = "\x1b[0m"

    LEVEL_COLORS = {
        logging.WARNING: YELLOW,
        logging.ERROR: RED,
        logging.CRITICAL: BOLD_RED,
    }

    def __init__(self):
        super().__init__(config.LOG_FORMAT, datefmt=config.LOG_DATE_FORMAT)

    def format(self, record):
        message = super().format(record)
        color = self.LEVEL_COLORS.get(record.levelno)
        return f"{color}{message}{self.RESET}" if color else message
# --- End Custom Log Formatter ---


def configure_logging(console_level: Union[int, str] = logging.WARNING, log_file: Optional[Path] = None) -> None:
    """
    Installs the stderr handler (colored) and, when log_file is given, a
    rotating file handler that records DEBUG and above.
    """
    if isinstance(console_level, str):
        console_level = logging.getLevelName(console_level)
        if not isinstance(console_level, int):
            console_level = logging.WARNING

    root_logger = logging.getLogger()
    for handler in root_logger.handlers[:]: # Clear any existing handlers
        root_logger.removeHandler(handler)
    root_logger.setLevel(logging.DEBUG if log_file else console_level)

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(console_level)
    console_handler.setFormatter(ColorLogFormatter())
    root_logger.addHandler(console_handler)

    if log_file:
        if config.ensure_dir(log_file.parent):
            try:
                file_handler = logging.handlers.RotatingFileHandler(
                    log_file, maxBytes=config.LOG_FILE_MAX_BYTES,
                    backupCount=config.LOG_FILE_BACKUP_COUNT, encoding='utf-8'
                )
                file_handler.setFormatter(logging.Formatter(config.LOG_FORMAT, datefmt=config.LOG_DATE_FORMAT))
                file_handler.setLevel(logging.DEBUG)
                root_logger.addHandler(file_handler)
                logging.debug(f"MAIN: File logging initialized at: {log_file}")
            except OSError as log_e:
                logging.error(f"MAIN: Failed to set up file logging at {log_file}: {log_e}")
        else:
            logging.warning(f"MAIN: Log directory '{log_file.parent}' could not be ensured. Skipping file logging.")


def main(argv: Optional[List[str]] = None) -> int:
    """Console entry point for `phpenv-config`."""
    argv = list(sys.argv[1:] if argv is None else argv)
    verbose = "-v" in argv or "--verbose" in argv
    configure_logging(logging.DEBUG if verbose else config.LOG_LEVEL, config.LOG_FILE)
    return cli.main(argv)


if __name__ == "__main__":
    sys.exit(main())
