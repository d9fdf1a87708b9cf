#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Colored console logging for the plotter CLI.

Log levels are colored only when stderr is a terminal:
- DEBUG: Cyan
- INFO: Green
- WARNING: Yellow
- ERROR/CRITICAL: Red
"""
from __future__ import annotations

import logging
import sys
from typing import Optional, TextIO, Union

DEFAULT_FORMAT = '%(asctime)s - %(levelname)s - [%(name)s:%(module)s.%(funcName)s:%(lineno)d] - %(message)s'
VALID_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class ColoredFormatter(logging.Formatter):
    """Formatter that wraps the level name in ANSI colors."""

    COLORS = {
        'DEBUG': '\033[36m',
        'INFO': '\033[32m',
        'WARNING': '\033[33m',
        'ERROR': '\033[31m',
        'CRITICAL': '\033[1;31m',
    }
    RESET = '\033[0m'

    def __init__(self, fmt: str = DEFAULT_FORMAT, datefmt: Optional[str] = None, use_colors: bool = True, stream: Optional[TextIO] = None):
        super().__init__(fmt, datefmt)
        target = stream if stream is not None else sys.stderr
        self.use_colors = use_colors and hasattr(target, 'isatty') and target.isatty()

    def format(self, record: logging.LogRecord) -> str:
        if not self.use_colors or record.levelname not in self.COLORS:
            return super().format(record)
        plain = record.levelname
        record.levelname = f"{self.COLORS[plain]}{plain}{self.RESET}"
        try:
            return super().format(record)
        finally:
            record.levelname = plain


def resolve_level(level: Union[int, str]) -> int:
    """Accept either a logging constant or a level name such as 'debug'."""
    if isinstance(level, int):
        return level
    name = str(level).strip().upper()
    if name not in VALID_LEVELS:
        raise ValueError(f"logging level must be one of: {list(VALID_LEVELS)}")
    return getattr(logging, name)


def setup_colored_logging(level: Union[int, str] = logging.INFO, fmt: str = DEFAULT_FORMAT, datefmt: Optional[str] = None, stream: Optional[TextIO] = None) -> None:
    """
    Configure the root logger with a single colored console handler.

    Args:
        level: Logging level, as an int or a level name
        fmt: Format string for log messages
        datefmt: Format string for timestamps
        stream: Output stream (defaults to stderr)
    """
    root = logging.getLogger()
    for handler in root.handlers[:]:
        root.removeHandler(handler)

    target = stream if stream is not None else sys.stderr
    console_handler = logging.StreamHandler(target)
    console_handler.setFormatter(ColoredFormatter(fmt=fmt, datefmt=datefmt, stream=target))

    root.setLevel(resolve_level(level))
    root.addHandler(console_handler)
    # Chatty third-party loggers stay at WARNING unless we are debugging
    if root.level > logging.DEBUG:
        for noisy in ("urllib3", "matplotlib"):
            logging.getLogger(noisy).setLevel(logging.WARNING)
