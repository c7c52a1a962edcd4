"""Provider contract: one prompt in, a stream of outbound events out.

Every provider delivers events through ``on_event`` only:

- zero or more ``AnswerEvent`` values, each with the full text so far,
- then exactly one ``DoneEvent`` or ``ErrorEvent``,
- or nothing further once ``cancel_event`` is set.

``generate_answer`` never raises for transport failures; those arrive as
``ErrorEvent``. Callers can swap providers without knowing which is active.
"""

from __future__ import annotations

import asyncio
from typing import Protocol, runtime_checkable

from ..events import EventCallback


@runtime_checkable
class Provider(Protocol):
    """Protocol for components that stream an answer for a single prompt."""

    async def generate_answer(
        self,
        prompt: str,
        on_event: EventCallback,
        cancel_event: asyncio.Event | None = None,
    ) -> None:
        ...
