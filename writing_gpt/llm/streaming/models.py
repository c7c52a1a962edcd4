"""
Streaming-specific dataclasses.
"""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from enum import Enum


class SSEEventType(Enum):
    """Server-Sent Event line kinds."""
    DATA = "data"
    COMPLETION = "completion"


class StreamStatus(Enum):
    """How a stream ended when it did not fail."""
    COMPLETED = "completed"
    CANCELLED = "cancelled"


@dataclass(frozen=True)
class RawSSEChunk:
    """One decoded line from the HTTP response body."""
    event_type: SSEEventType
    raw_data: str
    timestamp: float = field(default_factory=time.time)


@dataclass
class AnswerState:
    """Mutable per-call state of the answer being accumulated."""
    accumulated_text: str = ""
    message_id: str | None = None
    chunk_count: int = 0
    malformed_count: int = 0
    first_chunk_time: float | None = None
    last_chunk_time: float | None = None

    def update_timing(self, timestamp: float) -> None:
        """Update timing information for latency tracking."""
        if self.first_chunk_time is None:
            self.first_chunk_time = timestamp
        self.last_chunk_time = timestamp
        self.chunk_count += 1

    @property
    def streaming_duration(self) -> float:
        """Calculate total streaming duration."""
        if self.first_chunk_time is None or self.last_chunk_time is None:
            return 0.0
        return self.last_chunk_time - self.first_chunk_time


@dataclass(frozen=True)
class StreamingStats:
    """Statistics for one finished answer stream."""
    total_chunks: int
    malformed_chunks: int
    answer_length: int
    total_duration: float
