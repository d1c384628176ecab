"""Logging for the storefront.

stdlib logging owns the handlers (stdout, plus rotating files when
``LOG_DIR`` is set); structlog renders key-value events through them. Events
carry whatever is bound with ``request_context`` (request id, method, path),
so every line written while serving one request can be correlated.

Services log through module-level loggers::

    logger = structlog.get_logger(__name__)
    logger.info("order_placed", order_id=order.id, total=str(order.total_amount))
"""

import logging
import logging.handlers
import os
import sys
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

import structlog

from shared.config import get_environment

LEVEL_BY_ENVIRONMENT = {
    "development": "DEBUG",
    "test": "WARNING",
    "staging": "INFO",
    "production": "INFO",
}

# Chatty third-party loggers kept at WARNING whatever the app level is
QUIET_LOGGERS = ("urllib3", "asyncio", "stripe", "sqlalchemy.engine", "multipart")

_MAX_LOG_BYTES = 10 * 1024 * 1024


def get_log_level(environment: str | None = None) -> str:
    environment = environment or get_environment()
    return os.getenv("LOG_LEVEL", LEVEL_BY_ENVIRONMENT.get(environment, "INFO")).upper()


def _rotating_handler(path: Path, level: int | str) -> logging.Handler:
    handler = logging.handlers.RotatingFileHandler(path, maxBytes=_MAX_LOG_BYTES, backupCount=5, encoding="utf-8")
    handler.setLevel(level)
    return handler


def _handlers(level: str) -> list[logging.Handler]:
    console = logging.StreamHandler(sys.stdout)
    console.setLevel(level)
    handlers: list[logging.Handler] = [console]

    log_dir = os.getenv("LOG_DIR")
    if log_dir:
        directory = Path(log_dir)
        directory.mkdir(parents=True, exist_ok=True)
        handlers.append(_rotating_handler(directory / "storefront.log", level))
        handlers.append(_rotating_handler(directory / "storefront_error.log", logging.ERROR))
    return handlers


def _renderer(environment: str):
    if environment in ("staging", "production"):
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer(
        colors=sys.stdout.isatty(),
        exception_formatter=structlog.dev.RichTracebackFormatter(show_locals=False, max_frames=2),
    )


def configure_logging(environment: str | None = None) -> None:
    """Install handlers and the structlog pipeline. Safe to call more than once."""
    environment = environment or get_environment()
    level = get_log_level(environment)

    root = logging.getLogger()
    root.setLevel(level)
    root.handlers = _handlers(level)
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.CallsiteParameterAdder(
                parameters=[
                    structlog.processors.CallsiteParameter.MODULE,
                    structlog.processors.CallsiteParameter.LINENO,
                ]
            ),
            _renderer(environment),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


@contextmanager
def request_context(**values) -> Iterator[None]:
    """Bind values to every event logged inside the block, then drop them."""
    structlog.contextvars.clear_contextvars()
    structlog.contextvars.bind_contextvars(**values)
    try:
        yield
    finally:
        structlog.contextvars.clear_contextvars()
