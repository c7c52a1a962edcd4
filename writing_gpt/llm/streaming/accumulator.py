"""
Answer accumulation for streamed chat completion payloads.
"""

from __future__ import annotations

import json
import time
from typing import Any

import structlog

from ..events import AnswerEvent
from ..exceptions import MalformedPayloadError
from .models import AnswerState, StreamingStats

logger = structlog.get_logger(__name__)


class AnswerAccumulator:
    """
    Turns raw stream payloads into cumulative answer events.

    Each successful payload extends the running answer; the emitted event
    always carries the full text so far. Malformed payloads are logged and
    skipped without touching the state, so one corrupt line cannot abort
    or corrupt an otherwise healthy stream.
    """

    def __init__(self):
        self.state = AnswerState()

    def process_payload(self, payload: str) -> AnswerEvent | None:
        """Consume one payload; returns an event when the answer grew."""
        self.state.update_timing(time.time())

        try:
            fragment, message_id = self._extract(payload)
        except MalformedPayloadError as e:
            self.state.malformed_count += 1
            logger.warning(
                "Skipping malformed stream payload",
                error_message=str(e),
                raw_data=payload[:200],
            )
            return None

        if message_id is not None:
            self.state.message_id = message_id

        if not fragment:
            return None

        self.state.accumulated_text += fragment
        return AnswerEvent(
            text=self.state.accumulated_text,
            message_id=self.state.message_id,
            conversation_id=self.state.message_id,
        )

    @staticmethod
    def _extract(payload: str) -> tuple[str, str | None]:
        """Return ``(fragment, id)`` or raise MalformedPayloadError."""
        try:
            data = json.loads(payload)
        except json.JSONDecodeError as e:
            raise MalformedPayloadError(
                f"JSON decode error: {e}", raw_data=payload
            ) from e

        if not isinstance(data, dict):
            raise MalformedPayloadError("Payload is not a JSON object", raw_data=payload)

        choices = data.get("choices")
        if not isinstance(choices, list) or not choices:
            raise MalformedPayloadError("Payload has no choices", raw_data=payload)

        choice = choices[0]
        if not isinstance(choice, dict):
            raise MalformedPayloadError("Choice is not an object", raw_data=payload)

        # Complete messages carry "message"; streamed chunks carry "delta"
        body: Any = choice.get("message") or choice.get("delta") or {}
        if not isinstance(body, dict):
            raise MalformedPayloadError("Choice body is not an object", raw_data=payload)

        content = body.get("content")
        if content is not None and not isinstance(content, str):
            raise MalformedPayloadError("Content is not a string", raw_data=payload)

        message_id = data.get("id")
        if message_id is not None:
            message_id = str(message_id)

        return content or "", message_id

    def get_streaming_stats(self) -> StreamingStats:
        """Summarize the stream processed so far."""
        return StreamingStats(
            total_chunks=self.state.chunk_count,
            malformed_chunks=self.state.malformed_count,
            answer_length=len(self.state.accumulated_text),
            total_duration=self.state.streaming_duration,
        )

    def reset(self) -> None:
        """Reset accumulator state for new stream."""
        self.state = AnswerState()
