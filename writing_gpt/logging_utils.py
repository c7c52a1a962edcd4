"""
Centralized logging and error classification utilities.

This module provides decorators and helper functions to standardize logging
across the streaming layer:
- Structured logging with contextual information
- Error type classification for log records and error events
- Performance timing for async operations
"""

from __future__ import annotations

import asyncio
import functools
import logging
import time
from collections.abc import Awaitable, Callable
from contextlib import asynccontextmanager
from typing import Any, ParamSpec, TypeVar

import httpx
import structlog
from pydantic import ValidationError

from .llm.exceptions import MalformedPayloadError, StreamConnectionError

# Configure structured logging
structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.dev.ConsoleRenderer(colors=True),
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)

# Type variables for generic decorators
P = ParamSpec("P")
T = TypeVar("T")
AsyncCallable = Callable[P, Awaitable[T]]

logger = structlog.get_logger(__name__)


def configure_logging(level: str | int = "INFO") -> None:
    """Route log records to stderr at ``level``."""
    if isinstance(level, str):
        resolved = logging.getLevelName(level.upper())
        if not isinstance(resolved, int):
            raise ValueError(f"Unknown logging level '{level}'")
        level = resolved

    logging.basicConfig(level=level, format="%(message)s")
    logging.getLogger().setLevel(level)


class ErrorClassifier:
    """Maps exceptions to the categories used in logs and error events."""

    @staticmethod
    def classify_error(error: BaseException) -> str:
        """
        Classify an error into a category name.

        Args:
            error: The exception to classify

        Returns:
            Category such as ``connection_error`` or ``malformed_payload``
        """
        if isinstance(error, asyncio.CancelledError):
            return "cancelled"
        if isinstance(error, StreamConnectionError):
            if error.status_code is not None:
                return "http_status_error"
            if isinstance(error.__cause__, httpx.TimeoutException):
                return "timeout_error"
            if isinstance(error.__cause__, httpx.DecodingError):
                return "decoding_error"
            return "connection_error"
        if isinstance(error, MalformedPayloadError):
            return "malformed_payload"
        if isinstance(error, ValidationError):
            return "validation_error"
        if isinstance(error, TimeoutError | httpx.TimeoutException):
            return "timeout_error"
        if isinstance(error, ConnectionError | OSError | httpx.TransportError):
            return "connection_error"
        return "unknown_error"


def _elapsed_ms(start_time: float) -> float:
    return round((time.perf_counter() - start_time) * 1000, 2)


def _failure_fields(error: Exception, start_time: float) -> dict[str, Any]:
    """Structured fields describing a failed operation."""
    return {
        "error_type": type(error).__name__,
        "error_category": ErrorClassifier.classify_error(error),
        "error_message": str(error),
        "duration_ms": _elapsed_ms(start_time),
    }


def log_operation(
    operation: str,
    *,
    context: dict[str, Any] | None = None,
) -> Callable[[AsyncCallable[P, T]], AsyncCallable[P, T]]:
    """
    Decorator logging start, duration and outcome of an async call.

    Args:
        operation: Name of the operation in log records
        context: Additional fields bound to every record

    Returns:
        Decorated function with logging
    """
    def decorator(func: AsyncCallable[P, T]) -> AsyncCallable[P, T]:
        @functools.wraps(func)
        async def wrapper(*args: P.args, **kwargs: P.kwargs) -> T:
            operation_logger = logger.bind(
                operation=operation,
                function=func.__name__,
                **(context or {}),
            )
            operation_logger.debug("Operation started")
            start_time = time.perf_counter()

            try:
                result = await func(*args, **kwargs)
            except Exception as e:
                operation_logger.error(
                    "Operation failed", **_failure_fields(e, start_time)
                )
                raise

            operation_logger.info(
                "Operation finished", duration_ms=_elapsed_ms(start_time)
            )
            return result

        return wrapper
    return decorator


@asynccontextmanager
async def operation_context(
    operation: str,
    *,
    context: dict[str, Any] | None = None,
):
    """
    Async context manager logging the outcome of a block of work.

    Yields:
        Logger bound to ``operation`` and ``context``
    """
    operation_logger = logger.bind(operation=operation, **(context or {}))
    operation_logger.debug("Operation started")
    start_time = time.perf_counter()

    try:
        yield operation_logger
    except Exception as e:
        operation_logger.error("Operation failed", **_failure_fields(e, start_time))
        raise

    operation_logger.info("Operation finished", duration_ms=_elapsed_ms(start_time))
