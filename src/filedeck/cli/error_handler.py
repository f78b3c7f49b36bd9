"""
CLI error handling.

Maps any exception raised by a command to a CliError, logs it and prints
a one-line message. Returns the exit code for ``typer.Exit``.
"""

from __future__ import annotations

import logging

from rich.console import Console
from rich.markup import escape

from filedeck.shared.errors import (
    ApplicationError,
    CliError,
    ErrorCode,
    ErrorContext,
    FiledeckError,
    InfrastructureError,
    create_cli_error,
)
from filedeck.shared.logging import log_error

logger = logging.getLogger(__name__)

error_console = Console(stderr=True)


def _map_error_to_cli_error(error: Exception, command: str) -> CliError:
    if isinstance(error, CliError):
        return error

    if isinstance(error, ApplicationError):
        return create_cli_error(
            message=f"Application error: {error.message}",
            command=command,
            original_error=error,
        )

    if isinstance(error, InfrastructureError):
        return create_cli_error(
            message=f"Infrastructure error: {error.message}",
            command=command,
            original_error=error,
        )

    if isinstance(error, FiledeckError):
        return create_cli_error(message=error.message, command=command, original_error=error)

    if isinstance(error, OSError):
        return create_cli_error(
            message=f"File system error: {error}",
            command=command,
            original_error=error,
        )

    return create_cli_error(
        message=f"Unexpected error: {error}",
        command=command,
        original_error=error,
    )


def handle_cli_error(error: Exception, command: str) -> int:
    """Log and print ``error`` raised by ``command``.

    Returns:
        Exit code for the command
    """
    cli_error = _map_error_to_cli_error(error, command)
    log_error(f"{command} failed", cli_error, logger)
    error_console.print(f"[red]Error:[/red] {escape(cli_error.message)}")
    return cli_error.exit_code


def usage_error(message: str, command: str) -> CliError:
    """CliError for arguments typer cannot validate on its own."""
    return CliError(
        ErrorCode.CLI_INVALID_ARGUMENTS,
        message,
        ErrorContext(operation="cli", additional_data={"command": command}),
        command=command,
        exit_code=2,
    )
