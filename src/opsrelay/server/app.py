"""FastAPI WebSocket server for the relay endpoints.

Routes:

    WS   /ai          single-shot relay, no history
    WS   /start-chat  multi-turn chat relay
    WS   /ops         operations relay, replies run as shell commands
    GET  /health      -> {"status": "ok", "model": "..."}
    *    / and any unmatched path: empty 200 with permissive CORS headers

Every connection is handled by its own task and owns its conversation;
only the model provider and the executor are shared.
"""

from __future__ import annotations

import asyncio
import logging
import time
from contextlib import aclosing, asynccontextmanager
from typing import AsyncIterator, Awaitable, Callable

from fastapi import FastAPI, Response, WebSocket
from pydantic import BaseModel

from opsrelay.config.settings import Settings
from opsrelay.domain.models import Message
from opsrelay.executor.base import CommandExecutor
from opsrelay.executor.shell import ShellExecutor
from opsrelay.model.base import ModelError, ModelProvider
from opsrelay.relay.conversation import Conversation, single_turn
from opsrelay.relay.operations import OperationsRelay
from opsrelay.server.transport import MalformedMessageError, MessageChannel, TransportError

logger = logging.getLogger(__name__)

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Headers": "*",
    "Access-Control-Allow-Methods": "*",
}
ANY_METHOD = ["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]

# Close code for connections dropped after a model failure
INTERNAL_ERROR = 1011

TurnHandler = Callable[[str], Awaitable["str | None"]]


class HealthResponse(BaseModel):
    status: str = "ok"
    model: str = ""


def create_app(
    provider: ModelProvider | None = None,
    executor: CommandExecutor | None = None,
    settings: Settings | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application.

    Components not passed in are built from ``settings`` at startup.
    """
    settings = settings or Settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        if app.state.provider is None:
            from opsrelay.model.gemini import GeminiProvider

            app.state.provider = GeminiProvider(
                api_key=settings.require_api_key(),
                model=settings.model.name,
                relax_safety=settings.model.relax_safety,
            )
        if app.state.executor is None:
            app.state.executor = ShellExecutor(shell=settings.executor.shell)
        logger.info("Relay started (model=%s)", app.state.provider.model)
        yield
        logger.info("Relay stopped")

    app = FastAPI(
        title="opsrelay",
        description="WebSocket relay to a generative model and a shell",
        version="0.1.0",
        lifespan=lifespan,
    )

    app.state.provider = provider
    app.state.executor = executor

    @app.get("/health")
    async def health_check() -> HealthResponse:
        p: ModelProvider | None = app.state.provider
        return HealthResponse(status="ok", model=p.model if p else "")

    @app.websocket("/ai")
    async def single_shot(websocket: WebSocket) -> None:
        await websocket.accept()
        channel = MessageChannel(websocket)
        p: ModelProvider = app.state.provider

        async def turn(text: str) -> str | None:
            try:
                reply = await single_turn(p, text)
            except ModelError as e:
                logger.error("Model call failed, dropping turn: %s", e)
                return None
            logger.info("Response %s", reply)
            return reply

        await _serve(channel, turn)

    @app.websocket("/start-chat")
    async def chat(websocket: WebSocket) -> None:
        await websocket.accept()
        channel = MessageChannel(websocket)
        p: ModelProvider = app.state.provider
        conversation = Conversation(p.start_chat(), skip_empty=True)
        logger.info("Chat started with the model")

        async def turn(text: str) -> str | None:
            return await conversation.send(text, streaming=True)

        await _serve(channel, turn, dedicated_reader=True)

    @app.websocket("/ops")
    async def operations(websocket: WebSocket) -> None:
        await websocket.accept()
        channel = MessageChannel(websocket)
        p: ModelProvider = app.state.provider
        relay = OperationsRelay(Conversation(p.start_chat()), app.state.executor)
        logger.info("Operations chat started with the model")
        try:
            await relay.start()
        except ModelError as e:
            logger.error("Failed to prime operations session: %s", e)
            await channel.close(code=INTERNAL_ERROR, reason="model unavailable")
            return

        await _serve(channel, relay.handle, dedicated_reader=True)

    # Registered last so it only catches paths no other route matched.
    @app.api_route("/", methods=ANY_METHOD, include_in_schema=False)
    @app.api_route("/{path:path}", methods=ANY_METHOD, include_in_schema=False)
    async def root() -> Response:
        return Response(status_code=200, headers=CORS_HEADERS)

    return app


async def _serve(
    channel: MessageChannel, turn: TurnHandler, dedicated_reader: bool = False
) -> None:
    """Process and answer messages in arrival order until the connection ends.

    A handler returning None sends nothing for that turn. A ModelError
    escaping the handler closes the connection; a failed write ends it.
    """
    frames = _queued_frames(channel) if dedicated_reader else _inline_frames(channel)
    async with aclosing(frames):
        async for message in frames:
            start = time.monotonic()
            try:
                reply = await turn(message.content)
            except ModelError as e:
                logger.error("Model call failed, closing connection: %s", e)
                await channel.close(code=INTERNAL_ERROR, reason="model error")
                return
            if reply is None:
                continue

            try:
                await channel.send(Message(content=reply))
            except TransportError as e:
                logger.info("%s", e)
                return
            logger.info("Response time: %.3fs", time.monotonic() - start)


async def _inline_frames(channel: MessageChannel) -> AsyncIterator[Message]:
    """Yield well-formed messages until the transport fails."""
    while True:
        try:
            yield await channel.receive()
        except MalformedMessageError as e:
            logger.warning("%s", e)
        except TransportError as e:
            logger.info("%s", e)
            return


async def _queued_frames(channel: MessageChannel) -> AsyncIterator[Message]:
    """Like _inline_frames, but reads from a separate task feeding a queue."""
    queue: asyncio.Queue[Message | None] = asyncio.Queue()

    async def read() -> None:
        try:
            async for message in _inline_frames(channel):
                await queue.put(message)
        finally:
            queue.put_nowait(None)

    reader = asyncio.create_task(read())
    try:
        while (message := await queue.get()) is not None:
            yield message
    finally:
        reader.cancel()
        try:
            await reader
        except asyncio.CancelledError:
            pass


def main() -> None:
    """Entry point for running the relay server standalone."""
    from opsrelay.cli import main as cli_main

    cli_main(["serve"])


if __name__ == "__main__":
    main()
