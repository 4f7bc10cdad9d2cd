"""Package logger: coloured console output plus one log file per day.

The log folder defaults to ``~/studypdf_logs`` and can be moved with the
``STUDYPDF_LOG_DIR`` environment variable. When the folder cannot be
created, only the console handler is installed.
"""

import datetime
import logging
import os
import sys
from pathlib import Path
from typing import Optional

import termcolor

__appname__ = "studypdf"

if os.name == "nt":
    import colorama
    colorama.init()

LEVEL_COLORS = {
    "DEBUG": "blue",
    "INFO": "white",
    "WARNING": "yellow",
    "ERROR": "red",
    "CRITICAL": "red",
}

CONSOLE_FORMAT = "%(asctime)s %(levelname)s %(module)s:%(lineno)d - %(message)s"
FILE_FORMAT = "%(asctime)s [%(levelname)s] %(module)s:%(funcName)s:%(lineno)d - %(message)s"


class ColoredFormatter(logging.Formatter):
    """Colours the level tag and message of console records."""

    def __init__(self, fmt: str = CONSOLE_FORMAT, use_color: bool = True):
        super().__init__(fmt, datefmt="%H:%M:%S")
        self.use_color = use_color

    def format(self, record):
        text = super().format(record)
        color = LEVEL_COLORS.get(record.levelname)
        if not self.use_color or color is None:
            return text
        tag = f"{record.levelname:<7}"
        text = text.replace(record.levelname, tag, 1)
        attrs = ["bold"] if record.levelno >= logging.WARNING else None
        return termcolor.colored(text, color=color, attrs=attrs)


def log_dir() -> Path:
    override = os.environ.get("STUDYPDF_LOG_DIR")
    base = Path(override) if override else Path.home() / f"{__appname__}_logs"
    return base.expanduser()


def _file_handler() -> Optional[logging.Handler]:
    folder = log_dir()
    stamp = datetime.date.today().isoformat()
    try:
        folder.mkdir(parents=True, exist_ok=True)
        handler = logging.FileHandler(
            folder / f"{__appname__}_{stamp}.log", encoding="utf-8"
        )
    except OSError:
        return None
    handler.setFormatter(logging.Formatter(FILE_FORMAT))
    return handler


def set_log_level(level) -> None:
    """Apply a level name (``"DEBUG"``) or number to the package logger."""
    if isinstance(level, str):
        value = logging.getLevelName(level.upper())
        if not isinstance(value, int):
            raise ValueError(f"Unknown log level: {level!r}")
        level = value
    logger.setLevel(level)


logger = logging.getLogger(__appname__)
logger.setLevel(logging.INFO)

_console = logging.StreamHandler(sys.stderr)
_console.setFormatter(ColoredFormatter(use_color=sys.stderr.isatty()))
logger.addHandler(_console)

_file = _file_handler()
if _file is not None:
    logger.addHandler(_file)
else:
    logger.warning("Log folder %s is not writable; logging to console only",
                   log_dir())
