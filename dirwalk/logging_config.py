"""Structured logging configuration."""

import logging
import sys
from pathlib import Path

import structlog


def configure_logging(
    log_level: str = "WARNING",
    log_file: Path | None = None,
    format_type: str = "console",
) -> structlog.BoundLogger:
    """Configure structured logging on stderr, with an optional JSON log file.

    Matched paths own stdout, so log output never goes there.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Path to log file (JSON format)
        format_type: 'console' for human-readable, 'json' for structured

    Returns:
        Configured structlog logger
    """
    level = getattr(logging, log_level.upper())

    # Ensure log directory exists
    if log_file:
        log_file.parent.mkdir(parents=True, exist_ok=True)

    # Structlog processors
    shared_processors = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.stdlib.ExtraAdder(),
    ]

    if format_type == "json":
        console_renderers = [
            structlog.processors.dict_tracebacks,
            structlog.processors.JSONRenderer(),
        ]
    else:
        console_renderers = [
            structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty()),
        ]

    # Events are rendered by the stdlib handlers below
    structlog.configure(
        processors=shared_processors + [
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=False,
    )

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(level)
    console_handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            processors=[structlog.stdlib.ProcessorFormatter.remove_processors_meta]
            + console_renderers,
            foreign_pre_chain=shared_processors,
        )
    )

    root_logger = logging.getLogger()
    root_logger.handlers = [console_handler]
    root_logger.setLevel(level)

    # Add file handler for JSON logs if specified
    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setLevel(level)

        # JSON formatter for file
        json_formatter = structlog.stdlib.ProcessorFormatter(
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                structlog.processors.dict_tracebacks,
                structlog.processors.JSONRenderer(),
            ],
            foreign_pre_chain=shared_processors,
        )
        file_handler.setFormatter(json_formatter)

        root_logger.addHandler(file_handler)

    return structlog.get_logger()
