"""Shared test fixtures for the opsrelay test suite.

Provides scripted stand-ins for the model provider and the command
executor so relay and server behavior can be tested without network
access or real shell side effects.
"""

from __future__ import annotations

from typing import AsyncIterator

import pytest

from opsrelay.domain.models import (
    Candidate,
    CommandResult,
    Content,
    GenerationResponse,
    Part,
)
from opsrelay.executor.base import CommandExecutor
from opsrelay.model.base import ChatSession, ModelError, ModelProvider, merge_chunks


def text_response(*texts: str) -> GenerationResponse:
    """A response with one single-part candidate per text."""
    return GenerationResponse(
        candidates=[
            Candidate(content=Content(role="model", parts=[Part(text=t)])) for t in texts
        ]
    )


# ---------------------------------------------------------------------------
# Fake model
# ---------------------------------------------------------------------------


class FakeChatSession(ChatSession):
    """Chat session answering from a shared list of scripted replies."""

    def __init__(self, replies: list[str], fail: bool = False) -> None:
        super().__init__()
        self._replies = replies
        self._fail = fail
        self.sent: list[tuple[str, bool]] = []

    def _next_reply(self) -> str:
        if self._fail:
            raise ModelError("scripted failure", provider="fake")
        return self._replies.pop(0) if self._replies else ""

    async def send_message(self, text: str) -> GenerationResponse:
        self.sent.append((text, False))
        reply = self._next_reply()
        self._record(Content.from_text(text), Content.from_text(reply, role="model"))
        return text_response(reply)

    async def send_message_stream(self, text: str) -> AsyncIterator[GenerationResponse]:
        self.sent.append((text, True))
        reply = self._next_reply()
        half = len(reply) // 2
        chunks = [text_response(reply[:half]), text_response(reply[half:])]
        for chunk in chunks:
            yield chunk
        self._record(Content.from_text(text), merge_chunks(chunks))


class FakeProvider(ModelProvider):
    """Model provider with scripted single-shot responses and chat replies."""

    def __init__(
        self,
        responses: list[GenerationResponse] | None = None,
        chat_replies: list[str] | None = None,
        fail: bool = False,
    ) -> None:
        super().__init__(model="fake-model")
        self.responses = responses if responses is not None else []
        self.chat_replies = chat_replies if chat_replies is not None else []
        self.fail = fail
        self.fail_prompts: set[str] = set()
        self.prompts: list[str] = []
        self.sessions: list[FakeChatSession] = []

    async def generate(self, text: str) -> GenerationResponse:
        self.prompts.append(text)
        if self.fail or text in self.fail_prompts:
            raise ModelError("scripted failure", provider="fake")
        return self.responses.pop(0) if self.responses else GenerationResponse()

    def start_chat(self) -> FakeChatSession:
        session = FakeChatSession(self.chat_replies, fail=self.fail)
        self.sessions.append(session)
        return session

    async def health_check(self) -> bool:
        return True


# ---------------------------------------------------------------------------
# Fake executor
# ---------------------------------------------------------------------------


class FakeExecutor(CommandExecutor):
    """Executor returning scripted results; unknown commands succeed."""

    def __init__(self, results: dict[str, CommandResult] | None = None) -> None:
        self.results = results or {}
        self.commands: list[str] = []

    async def run(self, command: str) -> CommandResult:
        self.commands.append(command)
        if command in self.results:
            return self.results[command]
        return CommandResult(command=command, output=f"ran {command}\n", exit_code=0)


@pytest.fixture
def fake_provider() -> FakeProvider:
    return FakeProvider()


@pytest.fixture
def fake_executor() -> FakeExecutor:
    return FakeExecutor()
