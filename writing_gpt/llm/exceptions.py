"""
Error types for streaming LLM operations.

This module provides the error taxonomy used by the streaming layer:
- Transport and HTTP status failures (terminal for a call)
- Malformed stream payloads (local to the accumulator)
"""

from __future__ import annotations


class LLMError(Exception):
    """Base LLM error with rich context."""

    def __init__(
        self,
        message: str,
        provider: str = "unknown",
        model: str = "unknown",
        status_code: int | None = None,
        response_data: dict | None = None,
    ):
        super().__init__(message)
        self.provider = provider
        self.model = model
        self.status_code = status_code
        self.response_data = response_data or {}


class StreamConnectionError(LLMError, ConnectionError):
    """Request could not be established or the server answered non-2xx."""

    def __init__(
        self,
        message: str,
        detail: str | None = None,
        **kwargs,
    ):
        super().__init__(message, **kwargs)
        self.detail = detail


class MalformedPayloadError(LLMError, ValueError):
    """A stream payload is not JSON or lacks the expected shape."""

    def __init__(self, message: str, raw_data: str = "", **kwargs):
        super().__init__(message, **kwargs)
        self.raw_data = raw_data
