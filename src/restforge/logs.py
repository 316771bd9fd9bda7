"""Logging setup for restforge.

Library modules log through ``logging.getLogger(__name__)`` and stay silent
by default (the package logger carries a :class:`logging.NullHandler`).
:func:`enable_debug_logging` routes the ``restforge`` logger to stderr via
Rich, which shows every dispatched request and its status.

Colour follows `clig.dev <https://clig.dev/>`_ conventions: it is disabled
when ``NO_COLOR`` is set (any value) or ``TERM=dumb``.
"""

from __future__ import annotations

import logging
import os

from rich.console import Console
from rich.logging import RichHandler

LOGGER_NAME = "restforge"


def enable_debug_logging(
    level: int = logging.DEBUG,
    no_color: bool = False,
) -> logging.Handler:
    """Attach a stderr :class:`~rich.logging.RichHandler` to the package logger.

    Calling it again replaces the handler installed previously rather than
    stacking a second one.

    Args:
        level: Level for both the logger and the handler.
        no_color: Force plain output even on a colour-capable terminal.

    Returns:
        The installed handler, so callers can remove it again.
    """
    logger = logging.getLogger(LOGGER_NAME)
    for existing in list(logger.handlers):
        if isinstance(existing, RichHandler):
            logger.removeHandler(existing)

    console = Console(stderr=True, no_color=no_color or _should_disable_color())
    handler = RichHandler(console=console, show_path=False, markup=False)
    handler.setLevel(level)
    logger.addHandler(handler)
    logger.setLevel(level)
    return handler


def _should_disable_color() -> bool:
    if os.environ.get("NO_COLOR") is not None:
        return True
    if os.environ.get("TERM") == "dumb":
        return True
    return False
