"""
Structured logging for Confirmail.

Every module logs through ``structlog.get_logger(__name__)`` with an event
message plus key/value context. ``configure_logging`` routes those events
through the standard library so host services keep control of handlers.
Output is JSON by default (``LOG_JSON``) and a colored console format in
development.

Addresses and tokens are masked before they are logged; see
``src.utils.security``.
"""

import logging

import structlog

from src.core.config.settings import settings


def configure_logging(log_level: str | None = None, json_logs: bool | None = None) -> None:
    """
    Install the structlog processor chain.

    Events below the configured level are dropped before rendering; the rest
    get an ISO timestamp and their level, then are rendered as JSON or for
    the console.

    Args:
        log_level: Minimum level name; defaults to ``settings.LOG_LEVEL``.
        json_logs: Force JSON output on or off; defaults to ``settings.LOG_JSON``.
    """
    level_name = (log_level or settings.LOG_LEVEL).upper()
    use_json = settings.LOG_JSON if json_logs is None else json_logs
    renderer = structlog.processors.JSONRenderer() if use_json else structlog.dev.ConsoleRenderer()

    logging.basicConfig(format="%(message)s", level=getattr(logging, level_name, logging.INFO))
    logging.getLogger().setLevel(getattr(logging, level_name, logging.INFO))

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.stdlib.add_log_level,
            renderer,
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )


# Package-level logger for modules without a logger of their own.
logger = structlog.get_logger()
