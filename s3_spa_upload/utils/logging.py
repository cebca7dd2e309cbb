"""
Logging utilities for s3-spa-upload.

Provides colorized console logging for interactive runs, JSON logging for CI
and log shippers, a per-invocation run ID, and an entry/exit decorator for
public operations.

Features:
    - Structured JSON logging when LOG_FORMAT=json
    - Run ID tracking across worker threads
    - Entry/exit decorator with timing (DEBUG level)
    - Colorized console output via coloredlogs

Example usage:
    >>> from s3_spa_upload.utils.logging import get_logger, log_function_call, set_run_id
    >>>
    >>> logger = get_logger(__name__)
    >>> set_run_id("deploy-12345")
    >>>
    >>> @log_function_call
    >>> def publish(bucket: str) -> int:
    >>>     logger.info("Publishing", extra={"bucket": bucket})
    >>>     return 0
"""

import logging
import functools
import json
import os
import uuid
from typing import Any, Callable, TypeVar, cast, Optional, Dict
from datetime import datetime, timezone
from contextvars import ContextVar

import coloredlogs

# Type variable for generic decorator typing
F = TypeVar("F", bound=Callable[..., Any])

# Context variable for the run ID of the current invocation
_run_id: ContextVar[Optional[str]] = ContextVar("run_id", default=None)

# Global logging configuration
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Attributes present on every LogRecord; everything else is an "extra" field
_STANDARD_RECORD_ATTRS = frozenset(
    [
        "name",
        "msg",
        "args",
        "created",
        "filename",
        "funcName",
        "levelname",
        "levelno",
        "lineno",
        "module",
        "msecs",
        "pathname",
        "process",
        "processName",
        "relativeCreated",
        "thread",
        "threadName",
        "taskName",
        "exc_info",
        "exc_text",
        "stack_info",
        "message",
        "asctime",
    ]
)


def json_logging_enabled() -> bool:
    """Return True when LOG_FORMAT=json is set in the environment."""
    return os.getenv("LOG_FORMAT", "text").lower() == "json"


# ============================================================================
# Run ID Management
# ============================================================================

def get_run_id() -> str:
    """
    Get current run ID or generate a new one.

    Returns:
        Current run ID (generates a short UUID if not set)
    """
    run_id = _run_id.get()
    if run_id is None:
        run_id = uuid.uuid4().hex[:12]
        _run_id.set(run_id)
    return run_id


def set_run_id(run_id: str) -> None:
    """
    Set run ID for current context.

    Worker threads started through ``s3_spa_upload.utils.pool`` copy the
    submitting context, so every log line of one deploy carries the same ID.

    Args:
        run_id: Run ID to set
    """
    _run_id.set(run_id)


def clear_run_id() -> None:
    """Clear run ID for current context."""
    _run_id.set(None)


# ============================================================================
# JSON Formatter
# ============================================================================

class JSONFormatter(logging.Formatter):
    """
    JSON log formatter for structured logging.

    Example output:
        {
            "timestamp": "2026-01-04T10:30:15.123456Z",
            "level": "INFO",
            "logger": "s3_spa_upload.uploader.uploader",
            "message": "Uploaded s3://site/index.html | ...",
            "run_id": "3f9c2a1b7d4e",
            "extra": {"bucket": "site"}
        }
    """

    def format(self, record: logging.LogRecord) -> str:
        """
        Format log record as JSON string.

        Args:
            record: Log record to format

        Returns:
            JSON-formatted log string
        """
        log_data: Dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc)
            .isoformat()
            .replace("+00:00", "Z"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "run_id": get_run_id(),
        }

        log_data["source"] = {
            "file": record.pathname,
            "line": record.lineno,
            "function": record.funcName,
        }

        extra_fields = {
            key: value
            for key, value in record.__dict__.items()
            if key not in _STANDARD_RECORD_ATTRS
        }
        if extra_fields:
            log_data["extra"] = extra_fields

        if record.exc_info:
            log_data["exception"] = {
                "type": record.exc_info[0].__name__ if record.exc_info[0] else None,
                "message": str(record.exc_info[1]),
                "traceback": self.formatException(record.exc_info),
            }

        log_data["environment"] = {
            "hostname": os.getenv("HOSTNAME", "unknown"),
            "ci": os.getenv("CI", ""),
        }

        return json.dumps(log_data, default=str)


def setup_logging(level: str = "INFO", enable_colors: bool = True) -> None:
    """
    Configure global logging settings for the application.

    Uses JSON output when LOG_FORMAT=json, colorized text otherwise. Chatty
    AWS SDK loggers are capped at WARNING unless DEBUG is requested.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        enable_colors: Whether to enable colorized console output (default: True)

    Example:
        >>> setup_logging(level="DEBUG", enable_colors=True)
    """
    log_level = getattr(logging, level.upper(), logging.INFO)

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)

    # Remove existing handlers to avoid duplicates
    root_logger.handlers.clear()

    if json_logging_enabled():
        console_handler = logging.StreamHandler()
        console_handler.setLevel(log_level)
        console_handler.setFormatter(JSONFormatter())
        root_logger.addHandler(console_handler)
    elif enable_colors:
        coloredlogs.install(
            level=log_level,
            fmt=LOG_FORMAT,
            datefmt=LOG_DATE_FORMAT,
            logger=root_logger,
        )
    else:
        console_handler = logging.StreamHandler()
        console_handler.setLevel(log_level)
        console_handler.setFormatter(
            logging.Formatter(LOG_FORMAT, datefmt=LOG_DATE_FORMAT)
        )
        root_logger.addHandler(console_handler)

    sdk_level = logging.DEBUG if log_level <= logging.DEBUG else logging.WARNING
    for name in ("boto3", "botocore", "s3transfer", "urllib3"):
        logging.getLogger(name).setLevel(sdk_level)


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger instance with the specified name.

    Args:
        name: Logger name (typically __name__ of the calling module)

    Returns:
        Configured logger instance
    """
    return logging.getLogger(name)


def log_function_call(func: F) -> F:
    """
    Decorator that logs function entry and exit at DEBUG level.

    - Logs function entry with parameter values (repr)
    - Logs function exit with execution time
    - Logs exceptions with traceback and re-raises them unchanged

    Args:
        func: Function to be decorated

    Returns:
        Wrapped function with logging

    Example:
        >>> @log_function_call
        >>> def list_keys(bucket: str) -> list:
        >>>     return []
        >>>
        >>> # 2026-01-04 10:30:15 - module - DEBUG - ENTER list_keys(bucket='site')
        >>> # 2026-01-04 10:30:16 - module - DEBUG - EXIT list_keys (0.12s)
    """
    logger = get_logger(func.__module__)

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        run_id = get_run_id()

        arg_names = func.__code__.co_varnames[: func.__code__.co_argcount]
        args_repr = [f"{name}={value!r}" for name, value in zip(arg_names, args)]
        kwargs_repr = [f"{key}={value!r}" for key, value in kwargs.items()]
        all_args = ", ".join(args_repr + kwargs_repr)

        logger.debug(
            f"ENTER {func.__name__}({all_args})",
            extra={
                "function": func.__name__,
                "run_id": run_id,
                "event": "function_entry",
            },
        )

        start_time = datetime.now()

        try:
            result = func(*args, **kwargs)
        except Exception as error:
            execution_time = (datetime.now() - start_time).total_seconds()
            logger.debug(
                f"ERROR {func.__name__} raised {type(error).__name__}: {error}",
                extra={
                    "function": func.__name__,
                    "duration_seconds": execution_time,
                    "run_id": run_id,
                    "event": "function_error",
                    "error_type": type(error).__name__,
                },
                exc_info=True,
            )
            raise

        execution_time = (datetime.now() - start_time).total_seconds()
        logger.debug(
            f"EXIT {func.__name__} ({execution_time:.2f}s)",
            extra={
                "function": func.__name__,
                "duration_seconds": execution_time,
                "run_id": run_id,
                "event": "function_exit",
            },
        )
        return result

    return cast(F, wrapper)
