#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/flavormark/utils/timing.py
"""Timing helpers for debug logging."""

from __future__ import annotations

import logging
import time
from contextlib import contextmanager
from typing import Generator


@contextmanager
def debug_timer(logger: logging.Logger, operation: str) -> Generator[None, None, None]:
    """Log how long the wrapped block took, when DEBUG logging is enabled.

    Parameters
    ----------
    logger : logging.Logger
        Logger receiving the DEBUG message
    operation : str
        Description of the timed stage (e.g., "Parsing")

    Examples
    --------
        >>> logger = logging.getLogger(__name__)
        >>> with debug_timer(logger, "Parsing"):
        ...     document = parser.parse(text)  # doctest: +SKIP
        ... # Logs: "Parsing completed in 0.01s" at DEBUG level

    """
    if logger.isEnabledFor(logging.DEBUG):
        start_time = time.perf_counter()
        yield
        elapsed = time.perf_counter() - start_time
        logger.debug(f"{operation} completed in {elapsed:.2f}s")
    else:
        yield
