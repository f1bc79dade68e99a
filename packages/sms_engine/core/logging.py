"""Structured logging with structlog.

JSON lines in production, colorized console while developing. Batch
processing binds the message being parsed into the context, so every
event logged while handling it carries ``sms_id`` and ``sender``.

Usage:
    import structlog
    logger = structlog.get_logger()
    logger.info("batch_parsed", received=120, parsed=37)
"""

import logging
import sys
from contextlib import contextmanager

import structlog


def setup_logging(log_level: str = "INFO", json_output: bool = True) -> None:
    """Configure structured logging for the engine.

    Args:
        log_level: Python log level string (DEBUG, INFO, WARNING, ERROR).
        json_output: If True, use JSON renderer (production). If False,
                     use colorized console renderer (development).
    """
    processors: list = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]

    if json_output:
        processors.append(structlog.processors.JSONRenderer(ensure_ascii=False))
    else:
        processors.append(structlog.dev.ConsoleRenderer())

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, log_level.upper(), logging.INFO),
    )


def setup_logging_from_settings(settings) -> None:
    """Configure logging from a Settings instance."""
    setup_logging(log_level=settings.LOG_LEVEL, json_output=settings.json_logs)


@contextmanager
def message_context(message):
    """Bind a raw message's id and sender for the duration of the block."""
    with structlog.contextvars.bound_contextvars(
        sms_id=message.id, sender=message.sender_address
    ):
        yield
