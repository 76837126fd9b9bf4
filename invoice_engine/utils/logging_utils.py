"""Context fields and call tracing for engine log records."""

import functools
import logging
import threading
import uuid
from typing import Any, Callable, Dict, List, Optional

_state = threading.local()


def _current() -> Dict[str, Any]:
    return getattr(_state, "fields", {})


def generate_correlation_id() -> str:
    """A fresh id that ties together the records of one CLI run."""
    return str(uuid.uuid4())


def get_log_context() -> Dict[str, Any]:
    """Fields currently attached to records on this thread (a copy)."""
    return dict(_current())


class LogContext:
    """
    Attach fields such as ``client_id`` or ``invoice_number`` to every record
    logged on this thread while the block runs.

    Contexts nest: inner fields are layered over outer ones, and leaving a
    block restores exactly what was there before, even on error.

    Example:
        with LogContext(client_id="c1", invoice_number="T-ACM-2405-01"):
            logger.info("Building invoice")
    """

    def __init__(self, **fields: Any):
        self.fields = fields
        self._saved: List[Dict[str, Any]] = []

    def __enter__(self) -> "LogContext":
        outer = _current()
        self._saved.append(outer)
        _state.fields = {**outer, **self.fields}
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        _state.fields = self._saved.pop() if self._saved else {}


class _ContextFilter(logging.Filter):
    """Copies the active LogContext fields onto each record it sees."""

    def filter(self, record: logging.LogRecord) -> bool:
        for key, value in _current().items():
            setattr(record, key, value)
        return True


def _describe_call(name: str, args: tuple, kwargs: dict) -> str:
    parts = [repr(a) for a in args] + [f"{k}={v!r}" for k, v in kwargs.items()]
    return f"Entering {name} with args: {', '.join(parts)}"


def log_function_call(
    func: Optional[Callable] = None, *, include_args: bool = False, level: str = "DEBUG"
) -> Callable:
    """
    Log entry to and exit from the wrapped function on its module's logger.

    Works bare (``@log_function_call``) or with options
    (``@log_function_call(include_args=True, level="INFO")``). An exception
    is logged at ERROR with its traceback, then re-raised unchanged.

    Args:
        func: Function being decorated, when used bare
        include_args: Add the call's arguments to the entry message
        level: Level name for the entry and exit messages
    """
    numeric_level = logging.getLevelName(level.upper())

    def decorator(f: Callable) -> Callable:
        logger = logging.getLogger(f.__module__)

        @functools.wraps(f)
        def wrapper(*args, **kwargs):
            if include_args:
                logger.log(numeric_level, _describe_call(f.__name__, args, kwargs))
            else:
                logger.log(numeric_level, f"Entering {f.__name__}")

            try:
                result = f(*args, **kwargs)
            except Exception as e:
                logger.error(
                    f"Exception in {f.__name__}: {type(e).__name__}: {e}",
                    exc_info=True,
                )
                raise
            logger.log(numeric_level, f"Exiting {f.__name__}")
            return result

        return wrapper

    return decorator if func is None else decorator(func)
