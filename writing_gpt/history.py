"""Bounded history of recently finished answers."""

from __future__ import annotations

from collections import deque
from collections.abc import Iterator

from pydantic import BaseModel, ConfigDict


class AnswerRecord(BaseModel):
    """A finished (or interrupted) answer kept for display."""
    model_config = ConfigDict(frozen=True)

    action: str
    prompt: str
    text: str
    message_id: str | None = None
    outcome: str = "done"


class AnswerHistory:
    """
    Ring buffer keeping the last ``max_answers`` answers.

    Adding to a full buffer evicts and returns the oldest record.
    """

    def __init__(self, max_answers: int = 2):
        if max_answers < 1:
            raise ValueError("max_answers must be at least 1")
        self._records: deque[AnswerRecord] = deque()
        self.max_answers = max_answers

    def add(self, record: AnswerRecord) -> AnswerRecord | None:
        evicted = None
        if len(self._records) >= self.max_answers:
            evicted = self._records.popleft()
        self._records.append(record)
        return evicted

    def latest(self) -> AnswerRecord | None:
        return self._records[-1] if self._records else None

    def clear(self) -> None:
        self._records.clear()

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[AnswerRecord]:
        return iter(list(self._records))
