#!/usr/bin/env python3
# -*- coding: utf-8 -*-
import logging
from .colored_logging import setup_colored_logging, DEFAULT_FORMAT

def get_logger(name: str) -> logging.Logger:
    logger = logging.getLogger(name)
    if not logging.getLogger().handlers:
        setup_colored_logging(
            level=logging.INFO,
            fmt=DEFAULT_FORMAT,
            datefmt='%Y-%m-%d %H:%M:%S'
        )
    return logger
