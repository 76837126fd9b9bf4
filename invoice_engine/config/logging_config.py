"""Logging setup for the invoice engine.

Engine modules only call ``logging.getLogger(__name__)``. The CLI calls
:func:`configure_logging` once per run; tests call :func:`reset_logging`.
Records go to stderr and, optionally, to a size-rotated file.
"""

import json
import logging
import logging.handlers
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional

from invoice_engine.utils.logging_utils import _ContextFilter

LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
FORMATS = ("standard", "json")

STANDARD_FORMAT = "%(asctime)s - %(levelname)s - %(name)s - %(message)s"
STANDARD_DATEFMT = "%Y-%m-%d %H:%M:%S"
DEFAULT_MAX_FILE_SIZE = 10 * 1024 * 1024

# Attributes every LogRecord has; anything else came from extra={} or LogContext
_RECORD_ATTRIBUTES = frozenset(
    logging.LogRecord("", 0, "", 0, "", None, None).__dict__
) | {"message", "asctime"}


class JSONFormatter(logging.Formatter):
    """One JSON object per record, with context fields at the top level."""

    def format(self, record: logging.LogRecord) -> str:
        payload: Dict[str, Any] = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)

        payload.update(
            (key, value)
            for key, value in vars(record).items()
            if key not in _RECORD_ATTRIBUTES and not key.startswith("_")
        )
        # Decimal amounts and dates end up as strings
        return json.dumps(payload, default=str)


@dataclass
class LoggingConfig:
    """Where and how log records are written.

    Attributes:
        log_level: Root level name, normalized to upper case
        log_format: ``standard`` text lines or ``json`` records
        log_file: Rotating log file; no file output when None
        enable_console: Write records to stderr
        max_file_size: Rotation threshold in bytes
        backup_count: Rotated files to keep

    Raises:
        ValueError: If the level or format is unknown
    """

    log_level: str = "INFO"
    log_format: str = "standard"
    log_file: Optional[str] = None
    enable_console: bool = True
    max_file_size: int = DEFAULT_MAX_FILE_SIZE
    backup_count: int = 5

    def __post_init__(self) -> None:
        self.log_level = self.log_level.upper()
        if self.log_level not in LEVELS:
            raise ValueError(
                f"Invalid log level: {self.log_level}. "
                f"Must be one of {', '.join(LEVELS)}"
            )
        if self.log_format not in FORMATS:
            raise ValueError(
                f"Invalid log format: {self.log_format}. "
                f"Must be one of {', '.join(FORMATS)}"
            )

    @classmethod
    def from_env(cls, log_level: Optional[str] = None) -> "LoggingConfig":
        """Build a configuration from ``LOG_*`` environment variables.

        Reads LOG_LEVEL, LOG_FORMAT, LOG_FILE, LOG_CONSOLE, LOG_MAX_FILE_SIZE
        and LOG_BACKUP_COUNT. An explicit ``log_level`` (the CLI option or the
        loaded settings) takes precedence over LOG_LEVEL.
        """
        env = os.environ
        return cls(
            log_level=log_level or env.get("LOG_LEVEL", "INFO"),
            log_format=env.get("LOG_FORMAT", "standard"),
            log_file=env.get("LOG_FILE"),
            enable_console=env.get("LOG_CONSOLE", "true").lower() == "true",
            max_file_size=int(env.get("LOG_MAX_FILE_SIZE", DEFAULT_MAX_FILE_SIZE)),
            backup_count=int(env.get("LOG_BACKUP_COUNT", 5)),
        )

    def build_formatter(self) -> logging.Formatter:
        if self.log_format == "json":
            return JSONFormatter()
        return logging.Formatter(fmt=STANDARD_FORMAT, datefmt=STANDARD_DATEFMT)

    def build_handlers(self) -> List[logging.Handler]:
        handlers: List[logging.Handler] = []
        if self.enable_console:
            handlers.append(logging.StreamHandler())
        if self.log_file:
            Path(self.log_file).parent.mkdir(parents=True, exist_ok=True)
            handlers.append(
                logging.handlers.RotatingFileHandler(
                    filename=self.log_file,
                    maxBytes=self.max_file_size,
                    backupCount=self.backup_count,
                )
            )
        return handlers


def _clear_root_handlers(root: logging.Logger) -> None:
    for handler in list(root.handlers):
        root.removeHandler(handler)
        handler.close()


def configure_logging(config: LoggingConfig) -> None:
    """Install the handlers described by ``config`` on the root logger.

    Earlier handlers are closed first, so calling this twice does not
    duplicate output. Every handler shares one formatter and the filter
    that copies :class:`LogContext` fields onto records.
    """
    root = logging.getLogger()
    _clear_root_handlers(root)

    level = logging.getLevelName(config.log_level)
    root.setLevel(level)

    formatter = config.build_formatter()
    context_filter = _ContextFilter()
    for handler in config.build_handlers():
        handler.setLevel(level)
        handler.setFormatter(formatter)
        handler.addFilter(context_filter)
        root.addHandler(handler)


def reset_logging() -> None:
    """Drop all root handlers and go back to the WARNING level."""
    root = logging.getLogger()
    _clear_root_handlers(root)
    root.setLevel(logging.WARNING)
