"""Turn handling shared by the relay endpoints.

``single_turn`` serves the stateless endpoint. ``Conversation`` wraps the
chat session owned by one connection and implements the submit, drain and
read-last-history-entry sequence used by the chat and operations
endpoints.
"""

from __future__ import annotations

import logging

from opsrelay.model.base import ChatSession, ModelProvider
from opsrelay.model.render import content_string, response_string

logger = logging.getLogger(__name__)


async def single_turn(provider: ModelProvider, text: str) -> str:
    """Run one independent generation and render every candidate.

    Raises:
        ModelError: If the model call fails.
    """
    response = await provider.generate(text)
    return response_string(response)


class Conversation:
    """A chat session owned by a single connection.

    Example usage::

        conversation = Conversation(provider.start_chat())
        reply = await conversation.send("hello")
    """

    def __init__(self, session: ChatSession, skip_empty: bool = False) -> None:
        self._session = session
        self._skip_empty = skip_empty
        self._mismatches = 0

    @property
    def session(self) -> ChatSession:
        return self._session

    @property
    def history_mismatches(self) -> int:
        """How many exchanges did not grow the history by exactly two."""
        return self._mismatches

    async def send(self, text: str, streaming: bool = True) -> str:
        """Submit ``text`` and return the text of the newest history entry.

        The streamed form is drained completely; partial responses are
        discarded and only the history is read afterwards.

        Raises:
            ModelError: If the model call fails.
        """
        logger.debug("Sending message: %s", text)
        if self._skip_empty and text == "":
            return ""

        before = len(self._session.history)
        if streaming:
            async for _ in self._session.send_message_stream(text):
                pass
        else:
            await self._session.send_message(text)

        history = self._session.history
        after = len(history)
        if after != before + 2:
            self._mismatches += 1
            logger.warning("History length: got %d, want %d", after, before + 2)
        if after <= before:
            # The last entry belongs to an earlier turn; on /ops it would
            # re-run the previous command.
            return ""
        return content_string(history[-1])
