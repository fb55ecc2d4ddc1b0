"""
Logging configuration module.

Colored console output plus an optional plain-text log file.
"""

import logging
import os
import sys
from pathlib import Path

RESET = "\033[0m"
DIM = "\033[2m"

LEVEL_COLORS = {
    logging.DEBUG: DIM,
    logging.INFO: "\033[36m",
    logging.WARNING: "\033[33m",
    logging.ERROR: "\033[91m",
    logging.CRITICAL: "\033[1m\033[37m\033[41m",
}


class ColoredFormatter(logging.Formatter):
    """Formatter that colors the level name and dims the logger name."""

    def __init__(self, fmt: str, datefmt: str | None = None, use_colors: bool = True):
        super().__init__(fmt, datefmt)
        self.use_colors = use_colors

    def format(self, record: logging.LogRecord) -> str:
        if not self.use_colors:
            return super().format(record)

        levelname, name = record.levelname, record.name
        color = LEVEL_COLORS.get(record.levelno, "")
        record.levelname = f"{color}{levelname:8}{RESET}"
        record.name = f"{DIM}{name}{RESET}"
        try:
            return super().format(record)
        finally:
            # Restore for other handlers (file)
            record.levelname, record.name = levelname, name


def setup_logging(level: int | str = logging.INFO, log_file: str | None = None) -> None:
    """
    Configure application-wide logging.

    Args:
        level: Console level (logging.DEBUG, "INFO", ...)
        log_file: Optional path to log file; always receives DEBUG output
    """
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())

    use_colors = sys.stdout.isatty() and not os.environ.get("NO_COLOR")
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(
        ColoredFormatter(
            fmt='[%(asctime)s] %(levelname)s [%(name)s] %(message)s',
            datefmt='%H:%M:%S',
            use_colors=use_colors,
        )
    )
    console_handler.setLevel(level)

    handlers: list[logging.Handler] = [console_handler]

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_path, encoding='utf-8')
        file_handler.setFormatter(
            logging.Formatter(
                fmt='[%(asctime)s] %(levelname)-8s [%(name)s] %(message)s',
                datefmt='%Y-%m-%d %H:%M:%S',
            )
        )
        file_handler.setLevel(logging.DEBUG)
        handlers.append(file_handler)

    logging.basicConfig(level=logging.DEBUG, handlers=handlers, force=True)

    logger = logging.getLogger(__name__)
    logger.debug("Log level: %s", logging.getLevelName(level))
    if log_file:
        logger.debug("Log file: %s", log_file)
