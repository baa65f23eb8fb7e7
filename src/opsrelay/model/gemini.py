"""Google Gemini provider implementation.

Uses the google-genai SDK async client. Chat sessions keep their own
history in domain form and send it with every request, so the session
object stays owned by the connection that created it.
"""

from __future__ import annotations

import logging
from typing import Any, AsyncIterator

from opsrelay.domain.models import Candidate, Content, GenerationResponse, Part
from opsrelay.model.base import ChatSession, ModelError, ModelProvider, merge_chunks

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "gemini-1.5-flash"

RELAXED_CATEGORIES = (
    "HARM_CATEGORY_DANGEROUS_CONTENT",
    "HARM_CATEGORY_HARASSMENT",
)


class GeminiProvider(ModelProvider):
    """Model provider backed by the Gemini API.

    Example usage::

        provider = GeminiProvider(api_key=os.environ["GEMINI_API_KEY"])
        response = await provider.generate("hello")
        chat = provider.start_chat()
        await chat.send_message("hi")
    """

    def __init__(
        self,
        api_key: str,
        model: str = DEFAULT_MODEL,
        relax_safety: bool = True,
        client: Any | None = None,
    ) -> None:
        if not api_key and client is None:
            raise ModelError("Gemini API key is empty", provider="gemini")
        super().__init__(model=model)
        self._api_key = api_key
        self._relax_safety = relax_safety
        self._client = client
        self._config: Any | None = None

    def _ensure_client(self) -> Any:
        """Lazily initialize the google-genai client."""
        if self._client is None:
            from google import genai

            self._client = genai.Client(api_key=self._api_key)
            logger.info("Initialized Gemini client (model=%s)", self._model)
        return self._client

    def _generation_config(self) -> Any | None:
        if not self._relax_safety:
            return None
        if self._config is None:
            from google.genai import types

            self._config = types.GenerateContentConfig(
                safety_settings=[
                    types.SafetySetting(
                        category=getattr(types.HarmCategory, name),
                        threshold=types.HarmBlockThreshold.BLOCK_NONE,
                    )
                    for name in RELAXED_CATEGORIES
                ]
            )
        return self._config

    async def generate(self, text: str) -> GenerationResponse:
        return await self._generate([Content.from_text(text)])

    def start_chat(self) -> GeminiChatSession:
        return GeminiChatSession(self)

    async def health_check(self) -> bool:
        try:
            client = self._ensure_client()
            await client.aio.models.get(model=self._model)
            return True
        except Exception as e:
            logger.warning("Health check failed: %s", e)
            return False

    async def _generate(self, contents: list[Content]) -> GenerationResponse:
        client = self._ensure_client()
        try:
            response = await client.aio.models.generate_content(
                model=self._model,
                contents=[to_sdk_content(c) for c in contents],
                config=self._generation_config(),
            )
        except Exception as e:
            raise ModelError(f"Gemini API call failed: {e}", provider="gemini") from e
        return from_sdk_response(response)

    async def _generate_stream(
        self, contents: list[Content]
    ) -> AsyncIterator[GenerationResponse]:
        client = self._ensure_client()
        try:
            stream = await client.aio.models.generate_content_stream(
                model=self._model,
                contents=[to_sdk_content(c) for c in contents],
                config=self._generation_config(),
            )
            async for chunk in stream:
                yield from_sdk_response(chunk)
        except Exception as e:
            raise ModelError(f"Gemini streaming call failed: {e}", provider="gemini") from e


class GeminiChatSession(ChatSession):
    """Conversation bound to a GeminiProvider."""

    def __init__(self, provider: GeminiProvider) -> None:
        super().__init__()
        self._provider = provider

    async def send_message(self, text: str) -> GenerationResponse:
        user = Content.from_text(text)
        response = await self._provider._generate([*self._history, user])
        reply = _first_content(response)
        if reply is not None and reply.parts:
            self._record(user, reply)
        return response

    async def send_message_stream(self, text: str) -> AsyncIterator[GenerationResponse]:
        user = Content.from_text(text)
        chunks: list[GenerationResponse] = []
        async for chunk in self._provider._generate_stream([*self._history, user]):
            chunks.append(chunk)
            yield chunk
        reply = merge_chunks(chunks)
        if reply.parts:
            self._record(user, reply)


def _first_content(response: GenerationResponse) -> Content | None:
    if not response.candidates:
        return None
    return response.candidates[0].content


# ---------------------------------------------------------------------------
# SDK conversion
# ---------------------------------------------------------------------------


def to_sdk_content(content: Content) -> Any:
    from google.genai import types

    return types.Content(
        role=content.role,
        parts=[types.Part(text=part.text) for part in content.parts],
    )


def from_sdk_response(response: Any) -> GenerationResponse:
    """Convert a google-genai response (or stream chunk) to domain form.

    Only text parts are kept; non-text parts render as empty strings.
    """
    candidates = []
    for cand in getattr(response, "candidates", None) or []:
        sdk_content = getattr(cand, "content", None)
        if sdk_content is None:
            candidates.append(Candidate(content=None))
            continue
        parts = [
            Part(text=getattr(p, "text", None) or "")
            for p in (getattr(sdk_content, "parts", None) or [])
        ]
        role = "user" if getattr(sdk_content, "role", None) == "user" else "model"
        candidates.append(Candidate(content=Content(role=role, parts=parts)))
    return GenerationResponse(candidates=candidates)
