"""Structured logging setup.

Events go through the standard logging module, so nothing below WARNING is
emitted until configure_logging() lowers the level.
"""

import logging
import sys

import structlog


def _configure_structlog(json_output: bool) -> None:
    renderer = (
        structlog.processors.JSONRenderer()
        if json_output
        else structlog.dev.ConsoleRenderer(colors=False)
    )
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            renderer,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        # Loggers are created at import time; keep them following reconfiguration.
        cache_logger_on_first_use=False,
    )


_configure_structlog(json_output=False)


def configure_logging(level: str = "WARNING", json_output: bool = False) -> None:
    """Set the log level and output format.

    Args:
        level: Minimum level name ("DEBUG", "INFO", ...)
        json_output: Render events as JSON lines instead of console text

    Raises:
        ValueError: If the level name is unknown
    """
    log_level = getattr(logging, level.upper(), None)
    if not isinstance(log_level, int):
        raise ValueError(f"Unknown log level '{level}'")

    logging.basicConfig(format="%(message)s", stream=sys.stderr, level=log_level, force=True)
    _configure_structlog(json_output)


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Return a structlog logger bound to a module name."""
    return structlog.get_logger(name)
