"""Tests for the interactive terminal client."""

from __future__ import annotations

import io
import json
from unittest.mock import AsyncMock, patch

import pytest
import websockets

from opsrelay.client import DEFAULT_URL, _print_replies, run_client


class FakeConnection:
    """Stands in for a websockets client connection."""

    def __init__(self, inbound: list[str]) -> None:
        self.sent: list[str] = []
        self.recv = AsyncMock(side_effect=[*inbound, websockets.ConnectionClosed(None, None)])

    async def send(self, frame: str) -> None:
        self.sent.append(frame)

    async def __aenter__(self) -> FakeConnection:
        return self

    async def __aexit__(self, *exc) -> None:
        return None


class TestPrintReplies:
    @pytest.mark.asyncio
    async def test_prints_content_and_skips_bad_frames(self) -> None:
        conn = FakeConnection(['{"content": "file.txt"}', "garbage", '{"content": ""}'])
        lines: list[str] = []

        await _print_replies(conn, lines.append)

        assert lines == ["AI: file.txt", "AI: "]


class TestRunClient:
    def test_default_url_targets_ops(self) -> None:
        assert DEFAULT_URL == "ws://localhost:8080/ops"

    @pytest.mark.asyncio
    async def test_stdin_lines_are_sent_as_messages(self) -> None:
        conn = FakeConnection([])
        with patch("opsrelay.client.websockets.connect", return_value=conn) as connect:
            await run_client("ws://relay:9000/ops", stdin=io.StringIO("ls -la\nlist files\n"))

        connect.assert_called_once_with("ws://relay:9000/ops")
        assert [json.loads(f) for f in conn.sent] == [
            {"content": "ls -la"},
            {"content": "list files"},
        ]
