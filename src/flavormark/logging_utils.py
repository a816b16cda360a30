#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/flavormark/logging_utils.py
"""Handlers for the ``flavormark`` logger hierarchy.

flavormark modules only create loggers. These helpers attach a single handler
to the ``flavormark`` package logger so an embedding application can watch
pipeline stage timings and recovered-construct warnings without touching the
root logger.

Examples
--------
    >>> import io
    >>> from flavormark import html
    >>> from flavormark.logging_utils import capture_stage_timings
    >>> with capture_stage_timings(io.StringIO()) as stream:  # doctest: +SKIP
    ...     html("# Title")
    >>> "Parsing completed in" in stream.getvalue()  # doctest: +SKIP
    True

"""

from __future__ import annotations

import logging
import sys
from contextlib import contextmanager
from typing import Generator, Optional, TextIO

LIBRARY_LOGGER = "flavormark"
STAGE_FORMAT = "%(name)s: %(message)s"
TRACE_FORMAT = "[%(asctime)s] [%(levelname)s] [%(name)s] %(message)s"

# Marks handlers installed here so a second call replaces rather than stacks them
_HANDLER_MARK = "_flavormark_handler"


def _resolve_level(level: int | str) -> int:
    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(str(level).upper())
    return resolved if isinstance(resolved, int) else logging.INFO


def detach_library_handler() -> None:
    """Remove the handler installed by :func:`attach_library_handler`, if any."""
    logger = logging.getLogger(LIBRARY_LOGGER)
    for handler in list(logger.handlers):
        if getattr(handler, _HANDLER_MARK, False):
            logger.removeHandler(handler)
            handler.close()


def attach_library_handler(
    level: int | str = logging.DEBUG,
    stream: Optional[TextIO] = None,
    trace_mode: bool = False,
) -> logging.Handler:
    """Send ``flavormark`` log records to a stream.

    Parameters
    ----------
    level : int | str, default logging.DEBUG
        Threshold for the package logger; DEBUG enables the pipeline's stage
        timings. Unknown level names fall back to INFO.
    stream : TextIO, optional
        Destination, ``sys.stderr`` when omitted
    trace_mode : bool, default False
        Prefix each record with a timestamp and level

    Returns
    -------
    logging.Handler
        The installed handler

    """
    detach_library_handler()
    resolved = _resolve_level(level)

    handler = logging.StreamHandler(stream if stream is not None else sys.stderr)
    handler.setLevel(resolved)
    handler.setFormatter(
        logging.Formatter(
            TRACE_FORMAT if trace_mode else STAGE_FORMAT,
            datefmt="%Y-%m-%d %H:%M:%S" if trace_mode else None,
        )
    )
    setattr(handler, _HANDLER_MARK, True)

    logger = logging.getLogger(LIBRARY_LOGGER)
    logger.setLevel(resolved)
    logger.addHandler(handler)
    return handler


@contextmanager
def capture_stage_timings(stream: Optional[TextIO] = None) -> Generator[Optional[TextIO], None, None]:
    """Log pipeline stage timings to ``stream`` for the duration of the block.

    The package logger's previous level is restored on exit.

    """
    logger = logging.getLogger(LIBRARY_LOGGER)
    previous_level = logger.level
    attach_library_handler(logging.DEBUG, stream)
    try:
        yield stream
    finally:
        detach_library_handler()
        logger.setLevel(previous_level)


def silence_library_logging(level: int = logging.WARNING) -> None:
    """Raise the threshold of the ``flavormark`` logger hierarchy.

    Parameters
    ----------
    level : int, default logging.WARNING
        Minimum level emitted by flavormark modules

    """
    logging.getLogger(LIBRARY_LOGGER).setLevel(level)
