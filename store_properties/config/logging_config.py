"""Logging configuration with structlog.

Library modules obtain loggers through ``get_logger``. Each one wraps a
standard library logger, so nothing is emitted until the host application
configures ``logging`` (or calls ``setup_logging``). Scripts call
``setup_logging`` once at startup.
"""

import logging
import sys
from typing import Any

import structlog
from structlog.types import EventDict, Processor

APP_NAME = "store_properties"


def add_app_context(
    logger: logging.Logger, method_name: str, event_dict: EventDict
) -> EventDict:
    """Tag every log entry with the library name."""
    event_dict["app"] = APP_NAME
    return event_dict


def setup_logging(
    log_level: str = "INFO",
    json_logs: bool = False,
    verbose: bool = False,
) -> None:
    """Send store property events to stdout.

    Args:
        log_level: Threshold name, e.g. "DEBUG" to see rejected priority text
        json_logs: Render one JSON object per line instead of console text
        verbose: Add module, function and line number to each entry

    Example:
        >>> setup_logging(log_level="DEBUG", json_logs=True)
    """
    numeric_level = getattr(logging, log_level.upper(), logging.INFO)

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=numeric_level,
    )

    processors: list[Processor] = [
        structlog.stdlib.filter_by_level,
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        add_app_context,
    ]

    if verbose:
        processors.append(
            structlog.processors.CallsiteParameterAdder(
                {
                    structlog.processors.CallsiteParameter.MODULE,
                    structlog.processors.CallsiteParameter.FUNC_NAME,
                    structlog.processors.CallsiteParameter.LINENO,
                }
            )
        )

    if json_logs:
        processors.append(structlog.processors.format_exc_info)
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=True))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Structlog logger backed by the standard library logger ``name``.

    Levels and handlers are whatever the application set for ``logging``;
    with no configuration, debug events such as rejected parse input are
    dropped.

    Example:
        >>> logger = get_logger(__name__)
        >>> logger.debug("priority_parse_failed", text="Bogus", reason="unknown_level")
    """
    return structlog.wrap_logger(  # type: ignore[no-any-return]
        logging.getLogger(name), wrapper_class=structlog.stdlib.BoundLogger
    )


def bind_context(**kwargs: Any) -> None:
    """Attach key/values (e.g. ``command="priority"``) to later entries."""
    structlog.contextvars.bind_contextvars(**kwargs)


def clear_context() -> None:
    """Drop everything attached with ``bind_context``."""
    structlog.contextvars.clear_contextvars()
