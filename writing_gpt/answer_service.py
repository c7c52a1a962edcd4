"""
Answer service for writing-gpt.

This module handles the business logic around a single streamed answer:
- Composing prompts from named actions (rewrite, concise) and selected text
- Exposing a provider's callback contract as an async iterator of events
- Keeping a bounded history of finished answers
"""

from __future__ import annotations

import asyncio
import contextlib
from collections.abc import AsyncGenerator
from typing import Any

import structlog
from pydantic import BaseModel, ConfigDict, Field

from writing_gpt.config import Configuration
from writing_gpt.history import AnswerHistory, AnswerRecord
from writing_gpt.llm.events import AnswerEvent, DoneEvent, ErrorEvent
from writing_gpt.llm.providers import OpenAIProvider, Provider
from writing_gpt.logging_utils import operation_context

logger = structlog.get_logger(__name__)

# Action that sends the text as-is, without an instruction template
ASK_ACTION = "ask"

Event = AnswerEvent | DoneEvent | ErrorEvent


class AnswerServiceConfig(BaseModel):
    """Prompt templates and history size for the answer service."""
    model_config = ConfigDict(frozen=True)

    separator: str
    templates: dict[str, str]
    max_answers: int = Field(default=2, ge=1)

    @classmethod
    def from_configuration(cls, config: Configuration) -> AnswerServiceConfig:
        prompt_config = config.get_prompt_config()
        return cls(
            separator=prompt_config["separator"],
            templates=prompt_config["templates"],
            max_answers=config.get_history_config()["max_answers"],
        )


class AnswerService:
    """Runs prompt actions against a provider and records the results."""

    def __init__(self, provider: Provider, config: AnswerServiceConfig):
        self.provider = provider
        self.config = config
        self.history = AnswerHistory(config.max_answers)

    @classmethod
    def from_configuration(cls, config: Configuration) -> AnswerService:
        provider = OpenAIProvider(config.get_provider_config())
        return cls(provider, AnswerServiceConfig.from_configuration(config))

    @property
    def actions(self) -> list[str]:
        return [ASK_ACTION, *self.config.templates]

    def compose_prompt(self, action: str, text: str) -> str:
        """Prefix ``text`` with the instruction template of ``action``.

        Raises:
            ValueError: If the action is unknown or the text is blank.
        """
        text = text.strip()
        if not text:
            raise ValueError("Selected text must not be empty")

        if action == ASK_ACTION:
            return text

        template = self.config.templates.get(action)
        if template is None:
            raise ValueError(
                f"Unknown action '{action}', expected one of {self.actions}"
            )

        return f"{template.strip()} {self.config.separator}{text}"

    async def stream_answer(
        self,
        prompt: str,
        cancel_event: asyncio.Event | None = None,
    ) -> AsyncGenerator[Event]:
        """
        Yield the provider's events as an async iterator.

        Closing the iterator before the terminal event cancels the call.
        """
        if cancel_event is None:
            cancel_event = asyncio.Event()

        queue: asyncio.Queue[Event | None] = asyncio.Queue()

        async def run() -> None:
            try:
                await self.provider.generate_answer(
                    prompt, queue.put_nowait, cancel_event
                )
            finally:
                queue.put_nowait(None)

        task = asyncio.create_task(run())
        try:
            while True:
                event = await queue.get()
                if event is None:
                    break
                yield event
                if event.type != "answer":
                    break
            # Surface provider failures that were not turned into events
            await task
        finally:
            if not task.done():
                cancel_event.set()
                with contextlib.suppress(asyncio.CancelledError):
                    await task

    async def run_action(
        self,
        action: str,
        text: str,
        cancel_event: asyncio.Event | None = None,
    ) -> AsyncGenerator[Event]:
        """Compose, stream and record one answer for ``action``."""
        prompt = self.compose_prompt(action, text)
        if cancel_event is None:
            cancel_event = asyncio.Event()

        last_answer: AnswerEvent | None = None
        outcome = "cancelled"
        log_context: dict[str, Any] = {"action": action, "prompt_length": len(prompt)}

        async with operation_context("run_action", context=log_context) as op_logger:
            try:
                async for event in self.stream_answer(prompt, cancel_event):
                    if isinstance(event, AnswerEvent):
                        last_answer = event
                    elif isinstance(event, DoneEvent):
                        outcome = "done"
                    else:
                        outcome = "error"
                    yield event
            finally:
                if last_answer is not None:
                    evicted = self.history.add(
                        AnswerRecord(
                            action=action,
                            prompt=prompt,
                            text=last_answer.text,
                            message_id=last_answer.message_id,
                            outcome=outcome,
                        )
                    )
                    if evicted is not None:
                        op_logger.debug("Evicted answer from history", action=evicted.action)
                op_logger.info("Answer finished", outcome=outcome)
