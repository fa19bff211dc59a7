"""structlog configuration driven by the ``log`` config section."""

from __future__ import annotations

import logging
import sys
from typing import TYPE_CHECKING

import structlog

if TYPE_CHECKING:
    from .config import LogSection

LOGGER_NAME = "k1s0_pagination"


def configure_logging(log: LogSection) -> None:
    """Route the library's structlog events through stdlib logging.

    Only the ``k1s0_pagination`` logger hierarchy gets the configured level;
    the root logger is given a stdout handler only if it has none yet.
    """
    level = logging.getLevelName(log.level.upper())
    if not isinstance(level, int):
        level = logging.INFO
    logging.basicConfig(format="%(message)s", stream=sys.stdout)
    logging.getLogger(LOGGER_NAME).setLevel(level)

    renderer: structlog.types.Processor = (
        structlog.processors.JSONRenderer()
        if log.format == "json"
        else structlog.dev.ConsoleRenderer(colors=False)
    )
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.processors.format_exc_info,
            renderer,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        # module-level proxies must see a later reconfiguration
        cache_logger_on_first_use=False,
    )
