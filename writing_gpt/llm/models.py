"""
Core LLM dataclasses for single-turn prompt submission.

This module provides the request-side models:
- Provider configuration
- Message structures
- Request payloads and the immutable HTTP request descriptor
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Any


class ProviderType(Enum):
    """Supported LLM providers."""
    OPENAI = "openai"


class MessageRole(Enum):
    """OpenAI-compatible message roles."""
    SYSTEM = "system"
    USER = "user"
    ASSISTANT = "assistant"


@dataclass(frozen=True)
class LLMMessage:
    """OpenAI-compatible message structure."""
    role: MessageRole
    content: str

    def to_dict(self) -> dict[str, str]:
        return {"role": self.role.value, "content": self.content}


@dataclass(frozen=True)
class LLMRequest:
    """Chat completion request body."""
    model: str
    messages: list[LLMMessage]
    temperature: float = 0.7
    stream: bool = True

    def to_payload(self) -> dict[str, Any]:
        """Build the JSON body sent to the completions endpoint."""
        return {
            "model": self.model,
            "messages": [message.to_dict() for message in self.messages],
            "temperature": self.temperature,
            "stream": self.stream,
        }


@dataclass(frozen=True)
class RequestDescriptor:
    """Fully built HTTP request. Owned by the call that created it."""
    method: str
    url: str
    headers: Mapping[str, str]
    body: str

    def __post_init__(self) -> None:
        # Freeze the header mapping so the descriptor cannot be mutated.
        object.__setattr__(self, "headers", MappingProxyType(dict(self.headers)))

    @classmethod
    def for_chat_completion(
        cls, url: str, api_key: str, request: LLMRequest
    ) -> RequestDescriptor:
        """POST a JSON chat completion request with a bearer credential."""
        return cls(
            method="POST",
            url=url,
            headers={
                "Content-Type": "application/json",
                "Authorization": f"Bearer {api_key}",
                "Accept": "text/event-stream",
            },
            body=json.dumps(request.to_payload()),
        )


@dataclass(frozen=True)
class ProviderConfig:
    """Provider configuration."""
    provider: ProviderType
    base_url: str
    endpoint: str
    model: str
    api_key: str
    temperature: float = 0.7

    # Connection settings; read_timeout None means no limit while streaming
    connect_timeout: float = 10.0
    read_timeout: float | None = None
    write_timeout: float = 10.0
    pool_timeout: float = 10.0

    @property
    def url(self) -> str:
        return self.base_url.rstrip("/") + "/" + self.endpoint.lstrip("/")
