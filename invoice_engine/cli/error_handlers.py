"""Enhanced error handling for CLI commands."""

import json
import sys
import traceback
from typing import Optional

import click
from pydantic import ValidationError

from invoice_engine.cli.utils.formatters import format_error, format_warning


class CLIError(Exception):
    """Base exception for CLI errors with user-friendly messages."""

    exit_code = 4
    title = "Error"

    def __init__(self, message: str, recovery_hint: Optional[str] = None):
        """
        Initialize CLI error.

        Args:
            message: Error message to display
            recovery_hint: Optional hint for recovering from the error
        """
        self.message = message
        self.recovery_hint = recovery_hint
        super().__init__(message)


class ConfigurationError(CLIError):
    """Error related to configuration issues."""

    exit_code = 1
    title = "Configuration Error"


class SnapshotError(CLIError):
    """Error reading or writing the ledger snapshot."""

    exit_code = 2
    title = "Snapshot Error"


class DataValidationError(CLIError):
    """Error related to data validation."""

    exit_code = 3
    title = "Data Validation Error"


class ProcessingError(CLIError):
    """Error related to invoice processing."""

    exit_code = 4
    title = "Processing Error"


def handle_cli_error(error: Exception, debug: bool = False) -> int:
    """
    Handle CLI errors with user-friendly messages.

    Args:
        error: The exception that occurred
        debug: Whether to show full stack trace

    Returns:
        Exit code (1-6 for known error types, 130 on abort, 255 otherwise)
    """
    if isinstance(error, CLIError):
        click.echo(format_error(f"{error.title}: {error.message}"))
        if error.recovery_hint:
            click.echo(format_warning(f"Hint: {error.recovery_hint}"))
        return error.exit_code

    if isinstance(error, FileNotFoundError):
        click.echo(format_error(f"File Not Found: {error.filename or error}"))
        click.echo(
            format_warning(
                "Hint: Pass --snapshot or set LEDGER_SNAPSHOT_FILE in the .env file"
            )
        )
        return 5

    if isinstance(error, (ValidationError, json.JSONDecodeError)):
        click.echo(format_error("Malformed Ledger Data"))
        click.echo(str(error))
        return 6

    # Handle click.Abort (user cancellation)
    if isinstance(error, click.Abort):
        click.echo(format_warning("\nOperation cancelled by user"))
        return 130  # Standard exit code for SIGINT

    click.echo(format_error(f"Unexpected Error: {type(error).__name__}"))
    click.echo(str(error))

    if debug:
        click.echo("\nFull stack trace:")
        click.echo(
            "".join(
                traceback.format_exception(type(error), error, error.__traceback__)
            )
        )
    else:
        click.echo(format_warning("\nRun with --debug flag for full stack trace"))

    return 255


def with_error_handling(debug: bool = False):
    """
    Context manager adding standardized error handling to CLI commands.

    Args:
        debug: Whether to show full stack traces

    Returns:
        Context manager that exits with the mapped exit code on error

    Example:
        @click.command()
        @click.option('--debug', is_flag=True)
        def my_command(debug):
            with with_error_handling(debug):
                # Command implementation
                pass
    """

    class ErrorHandler:
        """Context manager for error handling."""

        def __init__(self, show_debug: bool):
            self.show_debug = show_debug

        def __enter__(self):
            return self

        def __exit__(self, exc_type, exc_val, exc_tb):
            if exc_val is not None:
                if isinstance(exc_val, (SystemExit, click.exceptions.Exit)):
                    return False
                exit_code = handle_cli_error(exc_val, self.show_debug)
                sys.exit(exit_code)
            return False  # Don't suppress exceptions

    return ErrorHandler(debug)
