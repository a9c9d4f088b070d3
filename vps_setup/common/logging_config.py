# vps_setup/common/logging_config.py
# -*- coding: utf-8 -*-
"""
Logging configuration for the installer.

Console output uses colored level tags ([INFO], [SUCCESS], [WARNING],
[ERROR], [STEP]) followed by the message. The optional log file gets a
plain timestamped format without colors.
"""

import logging
import sys
from pathlib import Path
from typing import Dict, List, Optional

from vps_setup.config.config_models import SYMBOLS_DEFAULT

STEP = 22
SUCCESS = 25
logging.addLevelName(STEP, "STEP")
logging.addLevelName(SUCCESS, "SUCCESS")

COLOR_RESET = "\033[0m"
TAG_COLORS: Dict[str, str] = {
    "DEBUG": "\033[0;36m",
    "INFO": "\033[0;34m",
    "STEP": "\033[0;35m",
    "SUCCESS": "\033[0;32m",
    "WARNING": "\033[1;33m",
    "ERROR": "\033[0;31m",
    "CRITICAL": "\033[1;31m",
}

CONSOLE_LOG_FORMAT = "%(tag)s %(message)s"
FILE_LOG_FORMAT = "%(asctime)s - %(levelname)s - %(name)s - %(message)s"


class SymbolFormatter(logging.Formatter):
    """
    A custom formatter that adds symbols to log messages based on the log level.
    """

    def __init__(self, fmt=None, datefmt=None, style="%", symbols=None):
        super().__init__(fmt, datefmt, style)
        self.symbols = symbols or SYMBOLS_DEFAULT

    def format(self, record):
        if record.levelno == logging.DEBUG:
            record.symbol = self.symbols.get("debug", "🐛")
        elif record.levelno == STEP:
            record.symbol = self.symbols.get("step", "➡️")
        elif record.levelno == SUCCESS:
            record.symbol = self.symbols.get("success", "✅")
        elif record.levelno == logging.INFO:
            record.symbol = self.symbols.get("info", "ℹ️")
        elif record.levelno == logging.WARNING:
            record.symbol = self.symbols.get("warning", "⚠️")
        elif record.levelno == logging.ERROR:
            record.symbol = self.symbols.get("error", "❌")
        elif record.levelno == logging.CRITICAL:
            record.symbol = self.symbols.get("critical", "🔥")
        else:
            record.symbol = ""

        return super().format(record)


class TaggedFormatter(SymbolFormatter):
    """Prefixes each record with a bracketed level tag, colored on terminals."""

    def __init__(self, fmt=None, datefmt=None, symbols=None, use_color=True):
        super().__init__(fmt or CONSOLE_LOG_FORMAT, datefmt, symbols=symbols)
        self.use_color = use_color

    def format(self, record):
        tag = f"[{record.levelname}]"
        color = TAG_COLORS.get(record.levelname)
        if self.use_color and color:
            tag = f"{color}{tag}{COLOR_RESET}"
        record.tag = tag
        return super().format(record)


def setup_logging(
    log_level: int = logging.INFO,
    log_file: Optional[str] = None,
    log_to_console: bool = True,
    use_color: Optional[bool] = None,
    symbols: Optional[Dict[str, str]] = None,
) -> None:
    """
    Configure the root logger for the installer.

    Parameters:
    log_level: int
        The console logging level. Defaults to logging.INFO.
    log_file: Optional[str]
        If given, every record at DEBUG and above is also appended to this file.
    log_to_console: bool
        Whether to log to stdout. Defaults to True.
    use_color: Optional[bool]
        Colorize the level tags. None means "only when stdout is a terminal".
    symbols: Optional[Dict[str, str]]
        Symbol table used by SymbolFormatter.

    Returns:
    None
    """
    handlers: List[logging.Handler] = []

    if use_color is None:
        use_color = sys.stdout.isatty()

    if log_to_console:
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(log_level)
        console_handler.setFormatter(
            TaggedFormatter(symbols=symbols, use_color=use_color)
        )
        handlers.append(console_handler)

    if log_file:
        try:
            log_file_path = Path(log_file)
            log_file_path.parent.mkdir(parents=True, exist_ok=True)
            file_handler = logging.FileHandler(log_file_path, mode="a")
            file_handler.setLevel(logging.DEBUG)
            file_handler.setFormatter(
                SymbolFormatter(
                    fmt=FILE_LOG_FORMAT,
                    datefmt="%Y-%m-%d %H:%M:%S",
                    symbols=symbols,
                )
            )
            handlers.append(file_handler)
        except OSError as e:
            print(
                f"Warning: Could not create file handler for log file {log_file}: {e}",
                file=sys.stderr,
            )

    if not handlers:  # pragma: no cover
        handlers.append(logging.NullHandler())

    root_logger = logging.getLogger()
    root_logger.setLevel(min(log_level, logging.DEBUG) if log_file else log_level)

    for handler in list(root_logger.handlers):
        root_logger.removeHandler(handler)

    for handler in handlers:
        root_logger.addHandler(handler)

    logging.getLogger(__name__).debug(
        f"Logging configured. Level: {logging.getLevelName(log_level)}."
    )
