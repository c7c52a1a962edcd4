"""Answer providers."""

from __future__ import annotations

from .base import Provider
from .openai import OpenAIProvider

__all__ = ["OpenAIProvider", "Provider"]
