"""
Streaming LLM integration.

This package provides the streaming-response protocol layer:
- Immutable request descriptors for chat completion endpoints
- SSE line parsing with sentinel and keep-alive handling
- Answer accumulation into cumulative answer events
- Cancellable streaming transport built on httpx

Concrete providers live in ``writing_gpt.llm.providers``.
"""

from __future__ import annotations

from .client import StreamingRequestClient
from .events import AnswerEvent, DoneEvent, ErrorEvent, EventSink, OutboundEvent
from .exceptions import LLMError, MalformedPayloadError, StreamConnectionError
from .models import (
    LLMMessage,
    LLMRequest,
    MessageRole,
    ProviderConfig,
    ProviderType,
    RequestDescriptor,
)
from .streaming.accumulator import AnswerAccumulator
from .streaming.models import AnswerState, StreamStatus
from .streaming.parser import SENTINEL_TOKEN, StreamingParser

__all__ = [
    "SENTINEL_TOKEN",
    # Streaming
    "AnswerAccumulator",
    # Events
    "AnswerEvent",
    "AnswerState",
    "DoneEvent",
    "ErrorEvent",
    "EventSink",
    # Exceptions
    "LLMError",
    # Core models
    "LLMMessage",
    "LLMRequest",
    "MalformedPayloadError",
    "MessageRole",
    "OutboundEvent",
    "ProviderConfig",
    "ProviderType",
    "RequestDescriptor",
    "StreamConnectionError",
    "StreamStatus",
    "StreamingParser",
    # Client
    "StreamingRequestClient",
]
