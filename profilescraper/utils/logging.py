"""Structured logging configuration with structlog."""

import logging
import os
import sys
from collections.abc import Iterator
from contextlib import contextmanager

import structlog

# Chatty at DEBUG; only surfaced when something goes wrong
NOISY_LOGGERS = ("asyncio", "sqlalchemy.engine", "sqlalchemy.pool", "httpx")


def configure_logging(log_level: str = "INFO", environment: str | None = None) -> None:
    """
    Configure structured logging for the application.

    Development gets coloured console output; production emits one JSON
    object per line so scrape events can be filtered by ``business_id``.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        environment: Environment (development or production). If None, read from ENVIRONMENT.
    """
    level = getattr(logging, log_level.upper())
    if environment is None:
        environment = os.getenv("ENVIRONMENT", "development")
    renderer = (
        structlog.processors.JSONRenderer()
        if environment.lower() == "production"
        else structlog.dev.ConsoleRenderer()
    )

    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=level)
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.StackInfoRenderer(),
            structlog.dev.set_exc_info,
            structlog.processors.TimeStamper(fmt="iso"),
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )


@contextmanager
def scrape_log_context(business_id: str) -> Iterator[None]:
    """
    Tag every log event emitted inside the block with ``business_id``.

    Covers the pipeline, retry and persistence layers without threading the
    id through each call. Context already bound (e.g. a request id) is kept.
    """
    with structlog.contextvars.bound_contextvars(business_id=business_id):
        yield
