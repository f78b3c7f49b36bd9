"""
Structured logging for filedeck.

Console output goes through rich's RichHandler; the optional log file
receives one JSON object per record so other tools can parse it.
"""

from __future__ import annotations

import json
import logging
import logging.handlers
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from rich.console import Console
from rich.logging import RichHandler
from rich.theme import Theme

from filedeck.shared.constants import Logging
from filedeck.shared.errors import ErrorContext, FiledeckError

ROOT_LOGGER_NAME = "filedeck"


class StructuredFormatter(logging.Formatter):
    """JSON formatter for the log file."""

    def format(self, record: logging.LogRecord) -> str:
        log_entry: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(
                record.created,
                tz=timezone.utc,
            ).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        for key in ("error_code", "context", "operation", "duration_ms", "result_info"):
            if hasattr(record, key):
                log_entry[key] = getattr(record, key)

        if record.exc_info:
            log_entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_entry, ensure_ascii=False, default=str)


def _create_rich_console() -> Console:
    custom_theme = Theme(
        {
            "logging.level.debug": "cyan",
            "logging.level.info": "green",
            "logging.level.warning": "yellow",
            "logging.level.error": "red bold",
            "logging.level.critical": "red bold reverse",
            "log.time": "dim cyan",
            "log.path": "dim blue",
        }
    )
    return Console(theme=custom_theme, stderr=True)


def setup_structured_logger(
    name: str = ROOT_LOGGER_NAME,
    level: str = Logging.DEFAULT_LEVEL,
    log_file: str | Path | None = None,
    *,
    use_rich_console: bool = True,
    max_bytes: int = Logging.MAX_BYTES,
    backup_count: int = Logging.BACKUP_COUNT,
) -> logging.Logger:
    """
    Configure the ``filedeck`` logger.

    Args:
        name: Logger name
        level: Log level name
        log_file: Optional rotating JSON log file
        use_rich_console: Use RichHandler for console output; plain JSON otherwise
        max_bytes: Rotation size of the log file
        backup_count: Number of rotated files to keep

    Returns:
        The configured logger
    """
    logger = logging.getLogger(name)

    if logger.handlers:
        logger.handlers.clear()

    log_level = getattr(logging, level.upper())
    logger.setLevel(log_level)

    if use_rich_console:
        handler: logging.Handler = RichHandler(
            console=_create_rich_console(),
            show_time=True,
            show_level=True,
            show_path=False,
            markup=False,
            rich_tracebacks=True,
            log_time_format="[%H:%M:%S]",
        )
    else:
        handler = logging.StreamHandler()
        handler.setFormatter(StructuredFormatter())
    handler.setLevel(log_level)
    logger.addHandler(handler)

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.handlers.RotatingFileHandler(
            log_path,
            maxBytes=max_bytes,
            backupCount=backup_count,
            encoding="utf-8",
        )
        file_handler.setFormatter(StructuredFormatter())
        logger.addHandler(file_handler)

    logger.propagate = False
    return logger


def log_error(context: str, err: BaseException, logger: logging.Logger | None = None) -> None:
    """Log a non-fatal error that is not surfaced anywhere else.

    This is the sink every handler uses for mirroring failures, cleanup
    failures and the detail of per-item failures.
    """
    logger = logger or logging.getLogger(ROOT_LOGGER_NAME)
    if isinstance(err, FiledeckError):
        log_operation_error(logger, err, operation=context)
        return
    logger.error(
        "%s: %s",
        context,
        err,
        extra={"operation": context, "context": {"error_type": type(err).__name__}},
    )


def log_operation_error(
    logger: logging.Logger,
    error: FiledeckError,
    operation: str | None = None,
    context: dict[str, Any] | ErrorContext | None = None,
) -> None:
    """Record a FiledeckError together with its structured context."""
    context_dict: dict[str, Any] = {}
    if error.context:
        context_dict.update(error.context.safe_dict())

    if context:
        if isinstance(context, ErrorContext):
            context_dict.update(context.safe_dict())
        else:
            context_dict.update(context)

    logger.error(
        "%s: %s",
        operation or error.context.operation or "operation",
        error.message,
        extra={
            "error_code": error.code.name,
            "context": context_dict,
            "operation": operation or error.context.operation,
        },
        exc_info=error.original_error,
    )


def log_operation_start(
    logger: logging.Logger,
    operation: str,
    context: dict[str, Any] | None = None,
) -> None:
    logger.debug(
        "Starting operation '%s'",
        operation,
        extra={"operation": operation, "context": context or {}},
    )


def log_operation_success(
    logger: logging.Logger,
    operation: str,
    duration_ms: float,
    result_info: dict[str, Any] | None = None,
) -> None:
    logger.debug(
        "Operation '%s' completed successfully",
        operation,
        extra={
            "operation": operation,
            "duration_ms": duration_ms,
            "result_info": result_info or {},
        },
    )


def log_file_operation(
    logger: logging.Logger,
    operation: str,
    source_path: str | Path,
    destination_path: str | Path | None = None,
) -> None:
    """
    Record one file operation at DEBUG level.

    Args:
        logger: Logger to write to
        operation: Kind of file operation (trash, copy, move and so on)
        source_path: Path the operation read from
        destination_path: Path the operation wrote to, if any
    """
    file_context = {"operation": operation, "source_path": str(source_path)}
    if destination_path is not None:
        file_context["destination_path"] = str(destination_path)

    logger.debug(
        "File %s: %s",
        operation,
        source_path,
        extra={"operation": f"file_{operation}", "context": file_context},
    )
