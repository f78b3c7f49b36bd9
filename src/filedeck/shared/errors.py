"""filedeck Error Handling Module

This module defines the error handling system for filedeck, providing
structured error classes with context information and user-friendly messages.

The error hierarchy follows these principles:
- One Source of Truth: All error codes are defined in ErrorCode enum
- Structured Context: ErrorContext provides additional information
- Proper Exception Chaining: Original exceptions are preserved
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, Union

# Type alias for primitive context values (str, int, float, bool only)
PrimitiveContextValue = Union[str, int, float, bool]


class ErrorCode(str, Enum):
    """Error codes for filedeck.

    This enum serves as the single source of truth for all error codes
    used throughout the engine.
    """

    # File System Errors
    FILE_NOT_FOUND = "FILE_NOT_FOUND"
    PERMISSION_DENIED = "PERMISSION_DENIED"
    INVALID_PATH = "INVALID_PATH"
    FILE_COPY_ERROR = "FILE_COPY_ERROR"
    FILE_MOVE_ERROR = "FILE_MOVE_ERROR"
    FILE_DELETE_ERROR = "FILE_DELETE_ERROR"
    FILE_CREATE_ERROR = "FILE_CREATE_ERROR"
    RENAME_TARGET_EXISTS = "RENAME_TARGET_EXISTS"
    NAME_RESOLUTION_FAILED = "NAME_RESOLUTION_FAILED"

    # Trash Errors
    TRASH_NOT_WRITABLE = "TRASH_NOT_WRITABLE"
    TRASH_MOVE_FAILED = "TRASH_MOVE_FAILED"
    TRASH_INFO_WRITE_FAILED = "TRASH_INFO_WRITE_FAILED"

    # Archive Errors
    ARCHIVE_UNSUPPORTED_FORMAT = "ARCHIVE_UNSUPPORTED_FORMAT"
    ARCHIVE_EXTRACT_FAILED = "ARCHIVE_EXTRACT_FAILED"
    ARCHIVE_COMPRESS_FAILED = "ARCHIVE_COMPRESS_FAILED"
    ARCHIVE_UNSAFE_ENTRY = "ARCHIVE_UNSAFE_ENTRY"

    # Clipboard Errors
    CLIPBOARD_MIRROR_FAILED = "CLIPBOARD_MIRROR_FAILED"

    # Operation Errors
    OPERATION_CANCELLED = "OPERATION_CANCELLED"
    INVALID_STATE_TRANSITION = "INVALID_STATE_TRANSITION"
    UNKNOWN_PROCESS = "UNKNOWN_PROCESS"

    # Configuration Errors
    CONFIG_INVALID = "CONFIG_INVALID"

    # CLI Errors
    CLI_INVALID_ARGUMENTS = "CLI_INVALID_ARGUMENTS"
    CLI_UNEXPECTED_ERROR = "CLI_UNEXPECTED_ERROR"


def _coerce_primitives(value: Any | None) -> dict[str, PrimitiveContextValue] | None:
    """Coerce additional_data values to primitives.

    Converts Path and Enum to primitive types.

    Raises:
        TypeError: If value is not a dict or contains unconvertible types
    """
    if value is None:
        return None

    if not isinstance(value, dict):
        error_msg = f"additional_data must be dict, got {type(value).__name__}"
        raise TypeError(error_msg)

    coerced: dict[str, PrimitiveContextValue] = {}
    for key, val in value.items():
        if isinstance(val, (str, int, float, bool)):
            coerced[key] = val
        elif isinstance(val, Path):
            coerced[key] = str(val)
        elif isinstance(val, Enum):
            coerced[key] = val.value
        else:
            error_msg = (
                f"Cannot coerce {type(val).__name__} to primitive type. "
                f"Only str, int, float, bool, Path, Enum are allowed."
            )
            raise TypeError(error_msg)

    return coerced


@dataclass(frozen=True)
class ErrorContext:
    """Context information for errors.

    Attributes:
        file_path: Optional file path associated with the error
        operation: Optional operation name that caused the error
        additional_data: Optional dict with primitive values only
    """

    file_path: str | None = None
    operation: str | None = None
    additional_data: dict[str, PrimitiveContextValue] | None = None

    def __post_init__(self) -> None:
        if self.additional_data is not None:
            coerced = _coerce_primitives(self.additional_data)
            object.__setattr__(self, "additional_data", coerced)

    def safe_dict(self) -> dict[str, Any]:
        """Export context as dict; additional_data is always present."""
        data: dict[str, Any] = {}
        if self.file_path is not None:
            data["file_path"] = self.file_path
        if self.operation is not None:
            data["operation"] = self.operation
        data["additional_data"] = self.additional_data or {}
        return data


class FiledeckError(Exception):
    """Base exception class for all filedeck errors."""

    def __init__(
        self,
        code: ErrorCode,
        message: str,
        context: ErrorContext | None = None,
        original_error: Exception | None = None,
    ) -> None:
        """Initialize FiledeckError.

        Args:
            code: Error code from ErrorCode enum
            message: Human-readable error message
            context: Additional context information
            original_error: Original exception that caused this error
        """
        self.code = code
        self.message = message
        self.context = context or ErrorContext()
        self.original_error = original_error
        super().__init__(f"{code.value}: {message}")

    def __str__(self) -> str:
        return f"{self.code.value}: {self.message}"

    def to_dict(self) -> dict[str, Any]:
        """Convert error to dictionary for logging."""
        return {
            "code": self.code.value,
            "message": self.message,
            "context": self.context.safe_dict(),
            "original_error": str(self.original_error) if self.original_error else None,
        }


class DomainError(FiledeckError):
    """Engine rule violations (bad state transitions, refused renames)."""


class InfrastructureError(FiledeckError):
    """Errors raised while touching the filesystem or the system clipboard."""


class TrashError(InfrastructureError):
    """Move-to-trash or permanent delete failures.

    The source is left untouched whenever a TrashError is raised from
    a trash relocation.
    """


class ArchiveError(InfrastructureError):
    """Archive extraction or compression failures.

    Entries already written before the failure are left in place.
    """


class ClipboardError(InfrastructureError):
    """System clipboard mirroring failures. Never fatal."""


class ApplicationError(FiledeckError):
    """Configuration and application flow errors."""


class CliError(ApplicationError):
    """CLI-specific error carrying the process exit code."""

    def __init__(
        self,
        code: ErrorCode,
        message: str,
        context: ErrorContext | None = None,
        original_error: Exception | None = None,
        command: str | None = None,
        exit_code: int = 1,
    ):
        super().__init__(code, message, context, original_error)
        self.command = command
        self.exit_code = exit_code


# Convenience functions for common error scenarios
def create_file_not_found_error(
    file_path: str | Path,
    operation: str | None = None,
    original_error: Exception | None = None,
) -> InfrastructureError:
    """Create a file not found error with context."""
    context = ErrorContext(file_path=str(file_path), operation=operation)
    return InfrastructureError(
        ErrorCode.FILE_NOT_FOUND,
        f"File not found: {file_path}",
        context,
        original_error,
    )


def create_permission_denied_error(
    path: str | Path,
    operation: str | None = None,
    original_error: Exception | None = None,
) -> InfrastructureError:
    """Create a permission denied error with context."""
    context = ErrorContext(file_path=str(path), operation=operation)
    return InfrastructureError(
        ErrorCode.PERMISSION_DENIED,
        f"Permission denied: {path}",
        context,
        original_error,
    )


def wrap_os_error(
    error: OSError,
    path: str | Path,
    operation: str,
    code: ErrorCode,
) -> InfrastructureError:
    """Map an OSError raised on ``path`` to a structured error.

    FileNotFoundError and PermissionError get their dedicated codes,
    everything else gets ``code``.
    """
    if isinstance(error, FileNotFoundError):
        return create_file_not_found_error(path, operation, error)
    if isinstance(error, PermissionError):
        return create_permission_denied_error(path, operation, error)
    context = ErrorContext(file_path=str(path), operation=operation)
    return InfrastructureError(code, f"{operation} failed for {path}: {error}", context, error)


def create_config_error(
    message: str,
    config_key: str | None = None,
    original_error: Exception | None = None,
) -> ApplicationError:
    """Create a configuration error with context."""
    additional_data: dict[str, PrimitiveContextValue] | None = (
        {"config_key": config_key} if config_key else None
    )
    context = ErrorContext(operation="load_config", additional_data=additional_data)
    return ApplicationError(ErrorCode.CONFIG_INVALID, message, context, original_error)


def create_cli_error(
    message: str,
    command: str | None = None,
    original_error: Exception | None = None,
    exit_code: int = 1,
) -> CliError:
    """Create a CLI error with context."""
    additional_data: dict[str, PrimitiveContextValue] | None = (
        {"command": command} if command else None
    )
    context = ErrorContext(operation="cli", additional_data=additional_data)
    return CliError(
        ErrorCode.CLI_UNEXPECTED_ERROR,
        message,
        context,
        original_error,
        command,
        exit_code,
    )
