#!/usr/bin/env python3
# Copyright (C) 2019 Checkmk GmbH - License: GNU General Public License v2
# This file is part of Checkmk (https://checkmk.com). It is subject to the terms and
# conditions defined in the file COPYING, which is part of this source code package.
"""Logging of the tempager checks

All loggers of the project live below the "tempager" logger. Nothing is
written unless a check calls setup_console_logging().
"""

import logging
import sys
from typing import TextIO

# Between INFO (20) and DEBUG (10): what -v shows
VERBOSE = 15
logging.addLevelName(VERBOSE, "VERBOSE")

logger = logging.getLogger("tempager")


def get_formatter(
    format_str: str = "%(asctime)s [%(levelname)s] [%(name)s] %(message)s",
) -> logging.Formatter:
    return logging.Formatter(format_str)


def clear_console_logging() -> None:
    logger.handlers[:] = []
    logger.addHandler(logging.NullHandler())
    logger.setLevel(logging.INFO)


clear_console_logging()


def setup_console_logging() -> None:
    """Write log messages to stderr, message text only

    stdout carries the single result line of the check.
    """
    setup_logging_handler(sys.stderr, get_formatter("%(message)s"))


def setup_logging_handler(stream: TextIO, formatter: logging.Formatter | None = None) -> None:
    """Replace all handlers of the tempager logger by one writing to *stream*"""
    handler = logging.StreamHandler(stream=stream)
    handler.setFormatter(formatter or get_formatter())
    logger.handlers[:] = [handler]


def verbosity_to_log_level(verbosity: int) -> int:
    """Map the number of -v switches to a log level

    >>> verbosity_to_log_level(0) == logging.WARNING
    True
    >>> verbosity_to_log_level(1) == VERBOSE
    True
    >>> verbosity_to_log_level(5) == logging.DEBUG
    True
    """
    if verbosity <= 0:
        return logging.WARNING
    if verbosity == 1:
        return VERBOSE
    return logging.DEBUG
