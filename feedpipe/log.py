"""structlog configuration."""

import logging

import structlog
from structlog.contextvars import merge_contextvars
from structlog.dev import ConsoleRenderer, set_exc_info
from structlog.processors import (
    JSONRenderer,
    StackInfoRenderer,
    TimeStamper,
    add_log_level,
    format_exc_info,
)

from .config import LoggingConfig


def configure_logging(config: LoggingConfig) -> None:
    """Configure structlog for CLI use."""
    processors = [
        merge_contextvars,
        add_log_level,
        StackInfoRenderer(),
        set_exc_info,
        TimeStamper(fmt="iso", utc=True),
    ]
    if config.json_output:
        processors += [format_exc_info, JSONRenderer()]
    else:
        processors.append(ConsoleRenderer())

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(
            logging.getLevelName(config.level)
        ),
        cache_logger_on_first_use=False,
    )
