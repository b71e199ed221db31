"""
Structured logging for the BookStore API.

structlog renders events as JSON (for log shipping) or as coloured console
lines (for local runs) and hands them to the standard library logger, which
owns the stdout and optional file handlers.
"""

import logging
import sys
from pathlib import Path
from typing import List, Optional, Union

import structlog
from structlog.stdlib import LoggerFactory


def _build_processors(log_format: str, debug: bool) -> List:
    """Return the structlog processor chain ending in the chosen renderer."""
    processors = [
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]
    if debug:
        processors.append(structlog.processors.CallsiteParameterAdder())

    if log_format == "console":
        processors.append(structlog.dev.ConsoleRenderer(colors=True))
    else:
        processors.append(structlog.processors.JSONRenderer())
    return processors


def _add_file_handler(log_file: Union[str, Path], level: int) -> logging.FileHandler:
    """Mirror rendered events into a file, creating its directory."""
    log_path = Path(log_file)
    log_path.parent.mkdir(parents=True, exist_ok=True)

    handler = logging.FileHandler(log_path)
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter("%(message)s"))
    logging.getLogger().addHandler(handler)
    return handler


def setup_logging(
    log_level: str = "INFO",
    log_format: str = "json",
    log_file: Optional[Union[str, Path]] = None,
    debug: bool = False
) -> None:
    """
    Configure structlog and the root logger.

    Args:
        log_level: DEBUG, INFO, WARNING, ERROR or CRITICAL
        log_format: ``json`` or ``console``
        log_file: Optional path that also receives every event
        debug: Add module, function and line number to each event
    """
    level = getattr(logging, log_level.upper())
    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=level)

    structlog.configure(
        processors=_build_processors(log_format, debug),
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=LoggerFactory(),
        context_class=dict,
        cache_logger_on_first_use=True,
    )

    if log_file:
        _add_file_handler(log_file, level)

    get_logger(__name__).info(
        "Logging configured",
        level=log_level,
        format=log_format,
        file=str(log_file) if log_file else None,
        debug=debug
    )


def get_logger(name: str) -> structlog.BoundLogger:
    """Return a structlog logger named after the calling module."""
    return structlog.get_logger(name)


class RequestLogger:
    """Emits one event per handled request and per unhandled exception."""

    def __init__(self, name: str = "api.requests"):
        self.logger = structlog.get_logger(name)

    def log_request(self, method: str, path: str, status_code: int, duration_ms: float) -> None:
        """Log a completed request; 4xx logs a warning and 5xx an error."""
        if status_code >= 500:
            level = "error"
        elif status_code >= 400:
            level = "warning"
        else:
            level = "info"
        getattr(self.logger, level)(
            "Request handled",
            method=method,
            path=path,
            status_code=status_code,
            duration_ms=round(duration_ms, 2)
        )

    def log_unhandled_error(self, method: str, path: str, error: Exception) -> None:
        """Log an exception that escaped a route handler, with traceback."""
        self.logger.error(
            "Unhandled exception",
            method=method,
            path=path,
            error=str(error),
            exc_info=error
        )
