"""Logging for the storefront tool API.

Every tool call binds the tenant it acts for, so each line a handler logs
carries the same identifiers the agent sent::

    {"event": "cart_item_added", "tool": "add-to-cart", "workspace_id": "ws-001",
     "conversation_id": "conv-9", "product_id": "prod-3", "cart_total": 25.0, ...}

stdlib logging owns the sinks (stdout, plus rotating files unless ``LOG_DIR``
is empty). structlog renders JSON in production and staging and a colored
console elsewhere. Shopify access tokens and tool credentials never reach a
sink: ``redact_credentials`` masks them wherever they appear in an event.
"""

import logging
import logging.handlers
import os
import sys
from pathlib import Path
from typing import Any

import structlog

LEVELS_BY_ENV = {
    "production": "INFO",
    "staging": "INFO",
    "development": "DEBUG",
    "test": "WARNING",
}

CREDENTIAL_KEYS = frozenset({"access_token", "authorization", "tool_secret", "x_tool_secret", "service_role_key"})

# Libraries that are chatty at DEBUG and add nothing to a tool-call trace.
QUIET_LOGGERS = ("urllib3", "requests", "asyncio", "protean", "multipart")


def _environment() -> str:
    return (os.getenv("ENVIRONMENT") or os.getenv("PROTEAN_ENV") or "development").lower()


def get_log_level() -> str:
    return os.getenv("LOG_LEVEL", LEVELS_BY_ENV.get(_environment(), "INFO"))


def redact_credentials(logger: Any, method_name: str, event_dict: dict) -> dict:
    """structlog processor masking credential values by key."""
    for key in CREDENTIAL_KEYS.intersection(event_dict):
        if event_dict[key]:
            event_dict[key] = "***"
    return event_dict


def _rotating_file(path: Path, level: int | str) -> logging.Handler:
    handler = logging.handlers.RotatingFileHandler(
        filename=path,
        maxBytes=10 * 1024 * 1024,
        backupCount=5,
        encoding="utf-8",
    )
    handler.setLevel(level)
    return handler


def setup_stdlib_logging(log_dir: str | None, log_file_prefix: str = "storefront") -> None:
    log_level = get_log_level()

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    root_logger.handlers = []

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(log_level)
    root_logger.addHandler(console_handler)

    if log_dir:
        path = Path(log_dir)
        path.mkdir(exist_ok=True)
        root_logger.addHandler(_rotating_file(path / f"{log_file_prefix}.log", log_level))
        root_logger.addHandler(_rotating_file(path / f"{log_file_prefix}_error.log", logging.ERROR))

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def setup_structlog() -> None:
    processors = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        redact_credentials,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        structlog.processors.CallsiteParameterAdder(
            parameters=[
                structlog.processors.CallsiteParameter.MODULE,
                structlog.processors.CallsiteParameter.FUNC_NAME,
            ]
        ),
    ]

    if _environment() in ("production", "staging"):
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(
            structlog.dev.ConsoleRenderer(
                colors=True,
                exception_formatter=structlog.dev.RichTracebackFormatter(show_locals=False, max_frames=3),
            )
        )

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def configure_logging(log_dir: str | None = None, log_file_prefix: str = "storefront") -> None:
    if log_dir is None:
        log_dir = os.getenv("LOG_DIR", "logs")
    setup_stdlib_logging(log_dir=log_dir, log_file_prefix=log_file_prefix)
    setup_structlog()


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name)


def bind_tool_call(tool: str, workspace_id: str, **ids: Any) -> None:
    """Tag the rest of this request's log lines with the tool and its tenant.

    ``ids`` are the entity ids the call targets (``conversation_id``,
    ``product_id``); ``None`` values are left out.
    """
    structlog.contextvars.bind_contextvars(
        tool=tool,
        workspace_id=str(workspace_id),
        **{key: str(value) for key, value in ids.items() if value is not None},
    )


def clear_context() -> None:
    structlog.contextvars.clear_contextvars()
