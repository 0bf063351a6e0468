"""Logging configuration for the checkout domain.

Standard library handlers (console plus rotating files) carry the output;
structlog formats it. Production renders JSON, everything else gets the
coloured console renderer. Request handlers bind a request id onto every
line through contextvars.
"""

import logging
import logging.handlers
import os
import sys
from pathlib import Path
from typing import Any

import structlog

_LEVELS = {"production": "INFO", "development": "DEBUG", "test": "WARNING"}
_QUIET = ("protean", "stripe", "urllib3", "asyncio")


def _environment() -> str:
    return (os.getenv("PROTEAN_ENV") or "development").lower()


def _rotating(path: Path, level: int | str) -> logging.Handler:
    handler = logging.handlers.RotatingFileHandler(
        filename=path,
        maxBytes=10 * 1024 * 1024,
        backupCount=5,
        encoding="utf-8",
    )
    handler.setLevel(level)
    return handler


def setup_stdlib_logging(level: str, log_dir: str, log_file_prefix: str) -> None:
    log_path = Path(log_dir)
    log_path.mkdir(exist_ok=True)

    console = logging.StreamHandler(sys.stdout)
    console.setLevel(level)

    root = logging.getLogger()
    root.setLevel(level)
    root.handlers = [
        console,
        _rotating(log_path / f"{log_file_prefix}.log", level),
        _rotating(log_path / f"{log_file_prefix}_error.log", logging.ERROR),
    ]

    for name in _QUIET:
        logging.getLogger(name).setLevel(logging.WARNING)


def setup_structlog(json_output: bool) -> None:
    if json_output:
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(
            colors=True,
            exception_formatter=structlog.dev.RichTracebackFormatter(show_locals=False, max_frames=2),
        )

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.CallsiteParameterAdder(
                parameters=[
                    structlog.processors.CallsiteParameter.FILENAME,
                    structlog.processors.CallsiteParameter.LINENO,
                ]
            ),
            renderer,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def configure_logging(level: str | None = None, log_dir: str = "logs", log_file_prefix: str = "checkout") -> None:
    """Configure stdlib handlers and structlog. LOG_LEVEL overrides the per-environment default."""
    env = _environment()
    level = level or os.getenv("LOG_LEVEL") or _LEVELS.get(env, "INFO")

    setup_stdlib_logging(level, log_dir, log_file_prefix)
    setup_structlog(json_output=env == "production")


def bind_request_context(**kwargs: Any) -> None:
    """Bind values (request id, path) onto every log line of the current request."""
    structlog.contextvars.bind_contextvars(**kwargs)


def clear_request_context() -> None:
    structlog.contextvars.clear_contextvars()
