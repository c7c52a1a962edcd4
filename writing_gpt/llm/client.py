"""
Streaming HTTP client for server-sent-event completion endpoints.
"""

from __future__ import annotations

import asyncio
import contextlib
from collections.abc import Callable

import httpx
import structlog

from .exceptions import StreamConnectionError
from .models import ProviderConfig, RequestDescriptor
from .streaming.models import SSEEventType, StreamStatus
from .streaming.parser import SENTINEL_TOKEN, StreamingParser

logger = structlog.get_logger(__name__)

RawLineCallback = Callable[[str], None]

# Bodies of failed responses are cut to this size in error details
MAX_ERROR_DETAIL = 2000


def build_timeout(config: ProviderConfig) -> httpx.Timeout:
    """Transport timeouts for a provider; no read limit unless configured."""
    return httpx.Timeout(
        connect=config.connect_timeout,
        read=config.read_timeout,
        write=config.write_timeout,
        pool=config.pool_timeout,
    )


class StreamingRequestClient:
    """
    Sends one request and feeds each SSE data payload to a callback.

    A shared ``httpx.AsyncClient`` may be injected (and is then owned by
    the caller); otherwise each call opens and closes its own client.
    """

    def __init__(
        self,
        http_client: httpx.AsyncClient | None = None,
        timeout: httpx.Timeout | None = None,
        sentinel: str = SENTINEL_TOKEN,
    ):
        self._http_client = http_client
        self._timeout = timeout or httpx.Timeout(10.0, read=None)
        self.sentinel = sentinel

    async def open(
        self,
        request: RequestDescriptor,
        on_raw_line: RawLineCallback,
        cancel_event: asyncio.Event | None = None,
    ) -> StreamStatus:
        """
        Stream ``request`` until the sentinel, connection close or cancellation.

        Returns:
            StreamStatus.COMPLETED or StreamStatus.CANCELLED

        Raises:
            StreamConnectionError: transport failure or non-2xx status
        """
        if cancel_event is None:
            cancel_event = asyncio.Event()

        if cancel_event.is_set():
            logger.info("Stream cancelled before connecting", url=request.url)
            return StreamStatus.CANCELLED

        stream_task = asyncio.create_task(
            self._stream(request, on_raw_line, cancel_event)
        )
        cancel_task = asyncio.create_task(cancel_event.wait())

        try:
            done, _ = await asyncio.wait(
                [stream_task, cancel_task],
                return_when=asyncio.FIRST_COMPLETED,
            )
        finally:
            # Tear down whichever side is still pending; this releases the
            # HTTP response on every exit path.
            for task in (cancel_task, stream_task):
                if not task.done():
                    task.cancel()
                    with contextlib.suppress(asyncio.CancelledError):
                        await task

        if stream_task in done:
            return stream_task.result()

        logger.info("Stream cancelled by caller", url=request.url)
        return StreamStatus.CANCELLED

    async def _stream(
        self,
        request: RequestDescriptor,
        on_raw_line: RawLineCallback,
        cancel_event: asyncio.Event,
    ) -> StreamStatus:
        # Parser state and stats belong to this call only
        parser = StreamingParser(self.sentinel)

        if self._http_client is not None:
            return await self._send(
                self._http_client, parser, request, on_raw_line, cancel_event
            )

        async with httpx.AsyncClient(timeout=self._timeout) as client:
            return await self._send(
                client, parser, request, on_raw_line, cancel_event
            )

    async def _send(
        self,
        client: httpx.AsyncClient,
        parser: StreamingParser,
        request: RequestDescriptor,
        on_raw_line: RawLineCallback,
        cancel_event: asyncio.Event,
    ) -> StreamStatus:
        try:
            async with client.stream(
                request.method,
                request.url,
                headers=dict(request.headers),
                content=request.body,
            ) as response:
                if not response.is_success:
                    await self._raise_for_status(response)

                async for chunk in parser.parse_sse_stream(response):
                    if cancel_event.is_set():
                        return StreamStatus.CANCELLED

                    if chunk.event_type == SSEEventType.COMPLETION:
                        logger.debug(
                            "Stream sentinel received",
                            url=request.url,
                            **parser.get_stats(),
                        )
                        return StreamStatus.COMPLETED

                    on_raw_line(chunk.raw_data)

                    if cancel_event.is_set():
                        return StreamStatus.CANCELLED

        except httpx.RequestError as e:
            # Transport failures plus body decoding errors (corrupt gzip etc.)
            logger.error(
                "HTTP error during streaming",
                url=request.url,
                error_type=type(e).__name__,
                error_message=str(e),
            )
            raise StreamConnectionError(f"HTTP error: {e!s}") from e

        logger.debug("Stream closed by server", url=request.url, **parser.get_stats())
        return StreamStatus.COMPLETED

    @staticmethod
    async def _raise_for_status(response: httpx.Response) -> None:
        """Raise StreamConnectionError carrying the body of a failed response."""
        try:
            body = await response.aread()
            detail = body.decode("utf-8", errors="replace")[:MAX_ERROR_DETAIL]
        except httpx.HTTPError:
            detail = None

        logger.error(
            "Streaming API returned error status",
            status_code=response.status_code,
            detail=detail,
        )
        message = f"Streaming API error {response.status_code}"
        if detail:
            message = f"{message}: {detail}"
        raise StreamConnectionError(
            message,
            detail=detail,
            status_code=response.status_code,
        )
