"""Structured logging setup.

Application modules log through ``logging.getLogger(__name__)``; those
records and structlog's own events share one renderer, so request context
bound by the web middleware (``request_id``) shows up on both.
"""

import logging
import os
import sys
from pathlib import Path
from typing import Any

import structlog

# Third-party loggers that log every outbound request at INFO
NOISY_LOGGERS = ("httpx", "httpcore", "openai", "uvicorn.access")

_configured = False


def _renderer(json_logs: bool) -> Any:
    if json_logs:
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer()


def configure_logging(level: str | None = None, json_logs: bool | None = None) -> None:
    """Configure structlog and route stdlib logging through it. Idempotent."""
    global _configured
    if _configured:
        return

    level = (level or os.getenv("LOG_LEVEL", "INFO")).upper()
    if json_logs is None:
        json_logs = os.getenv("JSON_LOGS", "false").lower() == "true"

    shared_processors: list[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]

    structlog.configure(
        processors=shared_processors + [structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    formatter = structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=shared_processors,
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            _renderer(json_logs),
        ],
    )

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    log_file = Path("logs/surveydisco.log")
    if log_file.parent.exists():
        handlers.append(logging.FileHandler(log_file))

    root = logging.getLogger()
    for handler in handlers:
        handler.setFormatter(formatter)
        root.addHandler(handler)
    root.setLevel(level)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(logging.WARNING, root.level))

    _configured = True
