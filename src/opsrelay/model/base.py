"""Abstract base classes for generative model providers.

All provider implementations must conform to this interface, enabling
the relay to swap the model backend (or a test double) without changing
the endpoint logic.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import AsyncIterator

from opsrelay.domain.models import Content, GenerationResponse, Part

logger = logging.getLogger(__name__)


class ChatSession(ABC):
    """A stateful conversation with a model.

    The session owns an ordered, append-only history. A successful
    exchange appends exactly two entries: the user turn and the model
    turn. A session belongs to a single connection and is never shared.
    """

    def __init__(self) -> None:
        self._history: list[Content] = []

    @property
    def history(self) -> list[Content]:
        return self._history

    @abstractmethod
    async def send_message(self, text: str) -> GenerationResponse:
        """Submit ``text`` as the next user turn and wait for the reply.

        Raises:
            ModelError: If the API call fails.
        """
        ...

    @abstractmethod
    def send_message_stream(self, text: str) -> AsyncIterator[GenerationResponse]:
        """Submit ``text`` and yield partial responses as they arrive.

        History is only updated once the stream has been fully drained.

        Raises:
            ModelError: If the API call fails, at any point of iteration.
        """
        ...

    def _record(self, user: Content, reply: Content) -> None:
        self._history.append(user)
        self._history.append(reply)


class ModelProvider(ABC):
    """Abstract interface for generative model providers."""

    def __init__(self, model: str) -> None:
        self._model = model

    @property
    def model(self) -> str:
        return self._model

    @abstractmethod
    async def generate(self, text: str) -> GenerationResponse:
        """Run one independent generation request with no history."""
        ...

    @abstractmethod
    def start_chat(self) -> ChatSession:
        """Open a fresh conversation with empty history."""
        ...

    @abstractmethod
    async def health_check(self) -> bool:
        """Check if the provider is reachable and authenticated."""
        ...


def merge_chunks(chunks: list[GenerationResponse]) -> Content:
    """Merge streamed chunks into a single model turn.

    Uses the first candidate of each chunk and concatenates adjacent text
    parts, so a streamed reply ends up as one history entry.
    """
    texts: list[str] = []
    for chunk in chunks:
        if not chunk.candidates or chunk.candidates[0].content is None:
            continue
        texts.extend(part.text for part in chunk.candidates[0].content.parts)
    if not texts:
        return Content(role="model", parts=[])
    return Content(role="model", parts=[Part(text="".join(texts))])


class ModelError(Exception):
    """Raised when a model API call fails."""

    def __init__(self, message: str, provider: str = "") -> None:
        super().__init__(message)
        self.provider = provider
