"""Structured logging built on Loguru.

Two output formats are supported:

- **console**: human-readable lines with the bound context shown inline,
  used during development
- **json**: one JSON object per line, used by deployed environments whose
  log collectors read stdout

Standard library logging (uvicorn, SQLAlchemy, httpx) is routed through
:class:`InterceptHandler` so every record leaves the process in the same
format. Context bound with ``logger.contextualize`` or ``logger.bind`` such
as the correlation ID, the request path or an order number is carried into
each record.
"""

from __future__ import annotations

import logging
import sys
from typing import Any, Final, Protocol, cast

import orjson
from loguru import logger

from src.core.constants import REDACTED

type LogContext = dict[str, Any]


class _LoggingState:
    """Tracks whether logging has already been configured."""

    def __init__(self) -> None:
        self.configured = False


_state = _LoggingState()


class LogConfigProtocol(Protocol):
    """Protocol for log configuration objects."""

    @property
    def log_level(self) -> str:
        """Logging level."""
        ...

    @property
    def log_formatter_type(self) -> str | None:
        """Log formatter type."""
        ...

    @property
    def sensitive_fields(self) -> list[str]:
        """Field names whose values are redacted."""
        ...


class SettingsProtocol(Protocol):
    """Protocol for settings objects that setup_logging can accept."""

    @property
    def debug(self) -> bool:
        """Debug mode flag."""
        ...

    @property
    def log_config(self) -> LogConfigProtocol:
        """Log configuration."""
        ...


CORRELATION_ID_DISPLAY_LENGTH: Final[int] = 8
MAX_FIELD_VALUE_LENGTH: Final[int] = 100
PRIORITY_FIELDS: Final[tuple[str, ...]] = (
    "correlation_id",
    "request_id",
    "method",
    "path",
    "status_code",
    "duration_ms",
)


def _escape(value: object) -> str:
    return str(value).replace("{", "{{").replace("}", "}}")


def _format_context_fields(extra: LogContext, sensitive: set[str]) -> list[str]:
    """Render bound context as ``key=value`` parts, priority fields first.

    Args:
        extra: Extra fields from the log record.
        sensitive: Lower-cased field names to redact.

    Returns:
        list[str]: Formatted context parts.
    """
    parts = []
    for field in PRIORITY_FIELDS:
        value = extra.get(field)
        if value is None:
            continue
        if field == "correlation_id":
            value = str(value)[:CORRELATION_ID_DISPLAY_LENGTH]
        elif field == "duration_ms":
            value = f"{value}ms"
        parts.append(f"<yellow>{_escape(value)}</yellow>")

    for key, value in extra.items():
        if key in PRIORITY_FIELDS or key.startswith("_") or value is None:
            continue
        str_value = str(value)
        if key.lower() in sensitive:
            str_value = REDACTED
        elif len(str_value) > MAX_FIELD_VALUE_LENGTH:
            str_value = str_value[: MAX_FIELD_VALUE_LENGTH - 3] + "..."
        parts.append(f"<dim>{_escape(key)}={_escape(str_value)}</dim>")
    return parts


def make_console_formatter(sensitive_fields: list[str]) -> Any:
    """Build the console format function for Loguru.

    Args:
        sensitive_fields: Field names whose values must never be printed.

    Returns:
        A callable usable as Loguru's ``format`` argument.
    """
    sensitive = {field.lower() for field in sensitive_fields}

    def format_console(record: dict[str, Any]) -> str:
        parts = [
            "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green>",
            "<level>{level: <8}</level>",
            "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan>",
        ]
        context_parts = _format_context_fields(record["extra"], sensitive)
        if context_parts:
            parts.append(" ".join(f"[{part}]" for part in context_parts))
        parts.append("{message}")
        line = " | ".join(parts) + "\n"
        if record.get("exception"):
            line += "{exception}"
        return line

    return format_console


def serialize_record(record: dict[str, Any], sensitive_fields: list[str]) -> str:
    """Serialize a Loguru record to a single JSON line.

    Args:
        record: Loguru record to format.
        sensitive_fields: Field names whose values are redacted.

    Returns:
        str: JSON-encoded log entry terminated by a newline.
    """
    sensitive = {field.lower() for field in sensitive_fields}
    log_entry: dict[str, Any] = {
        "timestamp": record["time"].isoformat(),
        "level": record["level"].name,
        "message": record["message"],
        "logger": record["name"],
        "function": record["function"],
        "line": record["line"],
    }

    for key, value in record.get("extra", {}).items():
        if key.startswith("_"):
            continue
        log_entry[key] = REDACTED if key.lower() in sensitive else value

    if exc := record.get("exception"):
        log_entry["exception"] = {
            "type": exc.type.__name__ if exc.type else None,
            "value": str(exc.value) if exc.value else None,
        }

    return orjson.dumps(log_entry, default=str).decode() + "\n"


class InterceptHandler(logging.Handler):
    """Intercept standard logging and redirect to Loguru."""

    def emit(self, record: logging.LogRecord) -> None:
        """Forward log record to Loguru.

        Args:
            record: Standard library LogRecord to forward.
        """
        try:
            level: str | int = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        # Find the caller outside the logging module
        frame, depth = logging.currentframe(), 2
        while frame and frame.f_code.co_filename == logging.__file__:
            frame = frame.f_back  # type: ignore[assignment]
            depth += 1

        logger.opt(depth=depth, exception=record.exc_info).log(
            level, record.getMessage()
        )


def setup_logging(settings: SettingsProtocol) -> None:
    """Configure Loguru sinks and route standard logging through them.

    Calling it more than once has no effect.

    Args:
        settings: Application settings containing log configuration.
    """
    if _state.configured:
        return

    logger.remove()

    log_config = settings.log_config
    formatter_type = log_config.log_formatter_type or "console"
    sensitive_fields = list(log_config.sensitive_fields)

    if formatter_type == "json":

        def json_sink(message: object) -> None:
            record = cast("Any", message).record
            sys.stdout.write(serialize_record(record, sensitive_fields))
            sys.stdout.flush()

        logger.add(
            json_sink,
            level=log_config.log_level,
            enqueue=True,
            diagnose=False,
            backtrace=False,
        )
    else:
        logger.add(
            sys.stdout,
            format=make_console_formatter(sensitive_fields),
            level=log_config.log_level,
            enqueue=True,
            colorize=True,
            diagnose=settings.debug,
            backtrace=settings.debug,
        )

    logging.basicConfig(handlers=[InterceptHandler()], level=0, force=True)
    for logger_name in ("uvicorn", "uvicorn.error", "uvicorn.access"):
        std_logger = logging.getLogger(logger_name)
        std_logger.handlers = [InterceptHandler()]
        std_logger.propagate = False

    # Per-request lines from httpx duplicate the carrier client's own logs
    logging.getLogger("httpx").setLevel(logging.WARNING)

    logger.info(
        "Logging configured with {} formatter",
        formatter_type,
        log_level=log_config.log_level,
    )
    _state.configured = True
