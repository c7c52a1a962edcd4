"""
SSE line parser for streamed chat completions.
"""

from __future__ import annotations

from collections.abc import AsyncGenerator

import httpx
import structlog

from .models import RawSSEChunk, SSEEventType

# In-band payload marking deliberate end of stream
SENTINEL_TOKEN = "[DONE]"

DATA_PREFIX = "data:"

logger = structlog.get_logger(__name__)


class StreamingParser:
    """Splits an SSE response body into data payloads, line by line."""

    def __init__(self, sentinel: str = SENTINEL_TOKEN):
        self.sentinel = sentinel
        self.stats = self._empty_stats()

    @staticmethod
    def _empty_stats() -> dict[str, int]:
        return {
            'total_lines': 0,
            'data_lines': 0,
            'ignored_lines': 0,
            'completions': 0,
        }

    async def parse_sse_stream(
        self, response: httpx.Response
    ) -> AsyncGenerator[RawSSEChunk]:
        """
        Yield one chunk per data line, in arrival order.

        The body is read incrementally. ``aiter_lines`` splits on ``\\n``,
        ``\\r\\n`` and ``\\r`` across chunk boundaries. Generation stops after
        the sentinel payload; otherwise it ends when the server closes the
        connection.
        """
        async for line in response.aiter_lines():
            chunk = self.parse_line(line)
            if chunk is None:
                continue

            yield chunk

            if chunk.event_type == SSEEventType.COMPLETION:
                return

    def parse_line(self, line: str) -> RawSSEChunk | None:
        """Classify a single line; blank and non-data lines give None."""
        if not line.strip():
            return None

        self.stats['total_lines'] += 1

        if not line.startswith(DATA_PREFIX):
            # Comments (": keep-alive"), event:, id: and retry: fields
            self.stats['ignored_lines'] += 1
            logger.debug("Ignoring non-data SSE line", line=line[:80])
            return None

        payload = line[len(DATA_PREFIX):]
        if payload.startswith(" "):
            payload = payload[1:]

        if payload.strip() == self.sentinel:
            self.stats['completions'] += 1
            return RawSSEChunk(
                event_type=SSEEventType.COMPLETION,
                raw_data=payload,
            )

        self.stats['data_lines'] += 1
        return RawSSEChunk(event_type=SSEEventType.DATA, raw_data=payload)

    def get_stats(self) -> dict[str, int]:
        """Get streaming statistics for monitoring."""
        return self.stats.copy()

    def reset_stats(self) -> None:
        """Reset statistics counters."""
        self.stats = self._empty_stats()
