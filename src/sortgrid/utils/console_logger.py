from __future__ import annotations

import logging
import sys
from typing import Optional, TextIO

CLI_LOG_FORMAT = "%(levelname)s %(name)s: %(message)s"


def ensure_console_logger(
    logger: logging.Logger,
    handler_name: str,
    *,
    level: int = logging.INFO,
    stream: Optional[TextIO] = None,
) -> logging.Handler:
    """Route *logger* to a console stream through one named handler.

    The handler is looked up by name first, so calling this once per CLI
    command never stacks duplicate handlers; a repeat call only adjusts the
    level.  Output goes to stderr unless *stream* is given, keeping stdout
    free for the rendered table.
    """
    handler = next((h for h in logger.handlers if h.get_name() == handler_name), None)
    if handler is None:
        handler = logging.StreamHandler(stream or sys.stderr)
        handler.set_name(handler_name)
        handler.setFormatter(logging.Formatter(CLI_LOG_FORMAT))
        logger.addHandler(handler)
    handler.setLevel(level)
    logger.setLevel(level)
    return handler
