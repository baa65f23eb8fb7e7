"""Interactive terminal client for the operations endpoint.

Relays stdin lines to ``/ops`` and prints each reply as ``AI: <content>``.
Intended for manual testing of a running relay.
"""

from __future__ import annotations

import asyncio
import logging
import sys
from typing import Callable, TextIO

import websockets
from pydantic import ValidationError

from opsrelay.domain.models import Message

logger = logging.getLogger(__name__)

DEFAULT_URL = "ws://localhost:8080/ops"


async def run_client(
    url: str = DEFAULT_URL,
    stdin: TextIO | None = None,
    write: Callable[[str], None] = print,
) -> None:
    """Connect to ``url`` and relay lines from ``stdin`` until EOF.

    Raises:
        OSError / websockets.InvalidHandshake: If the connection fails.
    """
    stdin = stdin or sys.stdin
    loop = asyncio.get_running_loop()

    async with websockets.connect(url) as ws:
        logger.info("Connected to %s", url)
        reader = asyncio.create_task(_print_replies(ws, write))
        try:
            while True:
                line = await loop.run_in_executor(None, stdin.readline)
                if not line:
                    break
                frame = Message(content=line.rstrip("\n")).model_dump_json()
                try:
                    await ws.send(frame)
                except websockets.ConnectionClosed as e:
                    logger.error("Error writing: %s", e)
                    return
        finally:
            reader.cancel()
            try:
                await reader
            except asyncio.CancelledError:
                pass


async def _print_replies(ws, write: Callable[[str], None]) -> None:
    """Print every inbound message until the connection closes."""
    while True:
        try:
            raw = await ws.recv()
        except websockets.ConnectionClosed as e:
            logger.info("Error reading: %s", e)
            return
        try:
            message = Message.model_validate_json(raw)
        except ValidationError as e:
            logger.warning("Error unmarshaling: %s", e)
            continue
        write(f"AI: {message.content}")
