"""Direct OpenAI chat completions provider."""

from __future__ import annotations

import asyncio

import structlog

from ...logging_utils import ErrorClassifier, log_operation
from ..client import StreamingRequestClient, build_timeout
from ..events import DoneEvent, ErrorEvent, EventCallback, EventSink
from ..exceptions import StreamConnectionError
from ..models import LLMMessage, LLMRequest, MessageRole, ProviderConfig, RequestDescriptor
from ..streaming.accumulator import AnswerAccumulator
from ..streaming.models import StreamStatus

logger = structlog.get_logger(__name__)


class OpenAIProvider:
    """Streams answers from an OpenAI-compatible completions endpoint."""

    def __init__(
        self,
        config: ProviderConfig,
        client: StreamingRequestClient | None = None,
    ) -> None:
        self.config = config
        self.client = client or StreamingRequestClient(timeout=build_timeout(config))

    def build_request(self, prompt: str) -> RequestDescriptor:
        """Single-turn user prompt with the provider's fixed parameters."""
        request = LLMRequest(
            model=self.config.model,
            messages=[LLMMessage(role=MessageRole.USER, content=prompt)],
            temperature=self.config.temperature,
        )
        return RequestDescriptor.for_chat_completion(
            self.config.url, self.config.api_key, request
        )

    @log_operation("generate_answer")
    async def generate_answer(
        self,
        prompt: str,
        on_event: EventCallback,
        cancel_event: asyncio.Event | None = None,
    ) -> None:
        if cancel_event is None:
            cancel_event = asyncio.Event()

        accumulator = AnswerAccumulator()
        sink = EventSink(on_event)
        request = self.build_request(prompt)

        def handle_line(payload: str) -> None:
            if sink.closed or cancel_event.is_set():
                return
            event = accumulator.process_payload(payload)
            if event is not None:
                sink.emit(event)

        try:
            status = await self.client.open(request, handle_line, cancel_event)
        except StreamConnectionError as e:
            if cancel_event.is_set():
                # The caller already cancelled; failures after that stay silent
                sink.close()
                logger.info(
                    "Answer cancelled",
                    model=self.config.model,
                    error_type=type(e).__name__,
                )
                return
            sink.emit(
                ErrorEvent(
                    reason=str(e),
                    error_type=ErrorClassifier.classify_error(e),
                    status_code=e.status_code,
                )
            )
            return

        stats = accumulator.get_streaming_stats()
        if status is StreamStatus.CANCELLED or cancel_event.is_set():
            sink.close()
            logger.info(
                "Answer cancelled",
                model=self.config.model,
                chunk_count=stats.total_chunks,
            )
            return

        logger.info(
            "Answer completed",
            model=self.config.model,
            chunk_count=stats.total_chunks,
            malformed_chunks=stats.malformed_chunks,
            answer_length=stats.answer_length,
        )
        sink.emit(DoneEvent())
