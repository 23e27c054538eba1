"""
Logging setup shared by the CLI and the API server.

The console gets level names colored with colorama; LOG_FILE, when set,
receives plain text at DEBUG.
"""

import logging
import sys
from typing import Optional

from colorama import Back, Fore, Style, init

init(autoreset=True)

DEFAULT_FORMAT = '%(asctime)s - %(levelname)s - %(name)s - %(message)s'

LEVEL_COLORS = {
    logging.DEBUG: Fore.CYAN,
    logging.INFO: Fore.GREEN,
    logging.WARNING: Fore.YELLOW,
    logging.ERROR: Fore.RED,
    logging.CRITICAL: Fore.RED + Back.WHITE + Style.BRIGHT,
}


class ColoredFormatter(logging.Formatter):
    """Formatter that wraps the level name in its color."""

    def format(self, record: logging.LogRecord) -> str:
        color = LEVEL_COLORS.get(record.levelno)
        if not color:
            return super().format(record)

        plain = record.levelname
        record.levelname = f"{color}{plain}{Style.RESET_ALL}"
        try:
            return super().format(record)
        finally:
            # The file handler formats the same record
            record.levelname = plain


def _console_handler(level: int, format_string: str, use_colors: bool) -> logging.Handler:
    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)
    formatter_class = ColoredFormatter if use_colors else logging.Formatter
    handler.setFormatter(formatter_class(format_string))
    return handler


def setup_logging(
    level: str = 'INFO',
    log_file: Optional[str] = None,
    format_string: Optional[str] = None,
    use_colors: bool = True
) -> logging.Logger:
    """
    Replace the root logger's handlers.

    Args:
        level: Console level name; unknown names fall back to INFO
        log_file: File that receives every record at DEBUG
        format_string: Record format (DEFAULT_FORMAT if omitted)
        use_colors: Color level names on the console

    Returns:
        The root logger
    """
    format_string = format_string or DEFAULT_FORMAT
    console_level = getattr(logging, level.upper(), logging.INFO)

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(_console_handler(console_level, format_string, use_colors))
    root.setLevel(console_level)

    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(logging.Formatter(format_string))
        root.addHandler(file_handler)
        root.setLevel(logging.DEBUG)

    return root


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)


logger = get_logger('sheetroll')


__all__ = ['ColoredFormatter', 'setup_logging', 'get_logger', 'logger']
