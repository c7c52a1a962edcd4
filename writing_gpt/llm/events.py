"""
Outbound events delivered to the consumer of a streamed answer.

A call produces zero or more ``answer`` events followed by exactly one
terminal event (``done`` or ``error``). A cancelled call ends without a
terminal event.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Annotated, Literal

import structlog
from pydantic import BaseModel, ConfigDict, Field

logger = structlog.get_logger(__name__)


class AnswerEvent(BaseModel):
    """Full answer accumulated so far, not just the newest fragment."""
    model_config = ConfigDict(frozen=True)

    type: Literal["answer"] = "answer"
    text: str
    message_id: str | None = None
    conversation_id: str | None = None


class DoneEvent(BaseModel):
    model_config = ConfigDict(frozen=True)

    type: Literal["done"] = "done"


class ErrorEvent(BaseModel):
    model_config = ConfigDict(frozen=True)

    type: Literal["error"] = "error"
    reason: str
    error_type: str = "unknown_error"
    status_code: int | None = None


OutboundEvent = Annotated[
    AnswerEvent | DoneEvent | ErrorEvent, Field(discriminator="type")
]

EventCallback = Callable[[AnswerEvent | DoneEvent | ErrorEvent], None]


class EventSink:
    """Forwards events to a consumer callback until a terminal outcome."""

    def __init__(self, on_event: EventCallback):
        self._on_event = on_event
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def emit(self, event: AnswerEvent | DoneEvent | ErrorEvent) -> bool:
        """Deliver ``event``; returns False if the sink was already closed."""
        if self._closed:
            logger.debug("Dropping event after terminal outcome", event_type=event.type)
            return False

        if event.type != "answer":
            self._closed = True
        self._on_event(event)
        return True

    def close(self) -> None:
        """End the sequence without a terminal event (cancellation)."""
        self._closed = True
