"""
Structured logging configuration using structlog wrapping stdlib.

Development mode renders colored console lines, otherwise every record is a
JSON object carrying the service name.

Usage:
    from core.logging_config import get_logger, setup_logging
    setup_logging(level="INFO", development=False, service_name="calendar-to-notion")
    logger = get_logger("sync")
"""

import logging
import sys

import structlog

from core.config import LOG_DEVELOPMENT, LOG_LEVEL, LOG_SERVICE_NAME


def setup_logging(
    level: str = LOG_LEVEL,
    development: bool = LOG_DEVELOPMENT,
    service_name: str = LOG_SERVICE_NAME,
) -> None:
    numeric_level = getattr(logging, level.upper(), None)
    if not isinstance(numeric_level, int):
        raise ValueError(f"Unknown log level '{level}'")

    def add_service_name(logger, method_name, event_dict):
        event_dict.setdefault("service", service_name)
        return event_dict

    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        add_service_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
    ]

    if development:
        renderer: structlog.types.Processor = structlog.dev.ConsoleRenderer()
    else:
        shared_processors.append(structlog.processors.format_exc_info)
        renderer = structlog.processors.JSONRenderer()

    structlog.configure(
        processors=[
            *shared_processors,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    formatter = structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=shared_processors,
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            renderer,
        ],
    )

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(formatter)

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(numeric_level)

    # Third-party clients are chatty at INFO
    for noisy in ("httpx", "httpcore", "googleapiclient.discovery_cache", "azure"):
        logging.getLogger(noisy).setLevel(max(numeric_level, logging.WARNING))


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name)


def shutdown_logging() -> None:
    """Flush and close all handlers before exit."""
    logging.shutdown()
