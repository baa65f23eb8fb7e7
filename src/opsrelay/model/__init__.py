"""Generative model module for opsrelay.

Provides a provider-agnostic interface for single-shot generation and
stateful chat sessions, plus the renderer that flattens responses into
the strings sent to clients.

Public API:
    ModelProvider -- Abstract base class
    ChatSession -- Abstract conversation handle
    GeminiProvider -- Google Gemini implementation
"""

from opsrelay.model.base import ChatSession, ModelError, ModelProvider
from opsrelay.model.render import content_string, response_string

__all__ = [
    "ChatSession",
    "GeminiProvider",
    "ModelError",
    "ModelProvider",
    "content_string",
    "response_string",
]


def __getattr__(name: str) -> type:
    """Lazy import for concrete implementations that require external deps."""
    if name == "GeminiProvider":
        from opsrelay.model.gemini import GeminiProvider
        return GeminiProvider
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
