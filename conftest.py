"""Pytest fixtures and helpers shared by the streaming tests."""

import json

import httpx
import pytest

from writing_gpt.llm.models import ProviderConfig, ProviderType


def sse_chunk(content, message_id="chatcmpl-1", field="message"):
    """One ``data:`` event carrying a completion fragment."""
    payload = {"id": message_id, "choices": [{"index": 0, field: {"content": content}}]}
    return f"data: {json.dumps(payload)}\n\n"


def sse_body(*events):
    return "".join(events).encode()


def mock_http_client(handler):
    """AsyncClient whose requests are answered by ``handler``."""
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


def event_stream_response(content, status_code=200):
    return httpx.Response(
        status_code,
        headers={"content-type": "text/event-stream"},
        content=content,
    )


@pytest.fixture
def provider_config():
    return ProviderConfig(
        provider=ProviderType.OPENAI,
        base_url="https://api.test/v1",
        endpoint="/chat/completions",
        model="gpt-3.5-turbo",
        api_key="sk-test",
        temperature=0.7,
    )


@pytest.fixture(autouse=True)
def env_cleanup(monkeypatch):
    """Avoid picking up a real API key from the environment."""
    monkeypatch.delenv("OPENAI_API_KEY", raising=False)
    yield
