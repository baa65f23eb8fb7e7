"""Tests for chat turn handling and the single-shot relay."""

from __future__ import annotations

import pytest

from opsrelay.domain.models import Candidate, Content, GenerationResponse, Part
from opsrelay.model.base import ModelError
from opsrelay.relay.conversation import Conversation, single_turn


class TestSingleTurn:
    @pytest.mark.asyncio
    async def test_renders_all_candidates(self, fake_provider) -> None:
        fake_provider.responses.append(
            GenerationResponse(
                candidates=[
                    Candidate(content=Content(parts=[Part(text="A")])),
                    Candidate(content=Content(parts=[Part(text="B")])),
                ]
            )
        )
        assert await single_turn(fake_provider, "hi") == "1:A2:B"
        assert fake_provider.prompts == ["hi"]

    @pytest.mark.asyncio
    async def test_model_error_propagates(self, fake_provider) -> None:
        fake_provider.fail = True
        with pytest.raises(ModelError):
            await single_turn(fake_provider, "hi")


class TestConversation:
    @pytest.mark.asyncio
    async def test_history_grows_by_two_per_turn(self, fake_provider) -> None:
        fake_provider.chat_replies.extend(["one", "two", "three"])
        conversation = Conversation(fake_provider.start_chat())

        replies = [await conversation.send(t) for t in ("a", "b", "c")]

        assert replies == ["one", "two", "three"]
        assert len(conversation.session.history) == 6
        assert conversation.history_mismatches == 0

    @pytest.mark.asyncio
    async def test_streaming_is_default_and_non_streaming_available(self, fake_provider) -> None:
        fake_provider.chat_replies.extend(["x", "y"])
        session = fake_provider.start_chat()
        conversation = Conversation(session)

        await conversation.send("streamed")
        await conversation.send("blocking", streaming=False)

        assert session.sent == [("streamed", True), ("blocking", False)]

    @pytest.mark.asyncio
    async def test_streamed_reply_is_read_from_history(self, fake_provider) -> None:
        fake_provider.chat_replies.append("uname -a")
        conversation = Conversation(fake_provider.start_chat())
        assert await conversation.send("kernel?") == "uname -a"

    @pytest.mark.asyncio
    async def test_empty_message_skipped_when_configured(self, fake_provider) -> None:
        session = fake_provider.start_chat()
        conversation = Conversation(session, skip_empty=True)
        assert await conversation.send("") == ""
        assert session.sent == []
        assert session.history == []

    @pytest.mark.asyncio
    async def test_history_mismatch_is_tolerated(self, fake_provider) -> None:
        session = fake_provider.start_chat()
        conversation = Conversation(session)

        async def no_record(text: str) -> GenerationResponse:
            return GenerationResponse()

        session.send_message = no_record  # type: ignore[method-assign]

        assert await conversation.send("hi", streaming=False) == ""
        assert conversation.history_mismatches == 1

    @pytest.mark.asyncio
    async def test_model_error_propagates(self, fake_provider) -> None:
        fake_provider.fail = True
        conversation = Conversation(fake_provider.start_chat())
        with pytest.raises(ModelError):
            await conversation.send("hi")

    @pytest.mark.asyncio
    async def test_stale_reply_is_not_returned(self, fake_provider) -> None:
        fake_provider.chat_replies.append("ls")
        session = fake_provider.start_chat()
        conversation = Conversation(session)
        assert await conversation.send("list files") == "ls"

        async def no_record(text: str):
            yield GenerationResponse()

        session.send_message_stream = no_record  # type: ignore[method-assign]

        assert await conversation.send("again") == ""
        assert conversation.history_mismatches == 1
