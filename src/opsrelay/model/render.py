"""Flattening of model responses into display strings.

The format is visible to clients and must stay stable: parts of one
candidate are joined with ``;`` and, when a response carries more than one
candidate, each candidate is prefixed with its 1-based index and ``:``
with no separator between candidates.
"""

from __future__ import annotations

from opsrelay.domain.models import Content, GenerationResponse


def response_string(response: GenerationResponse) -> str:
    """Render every candidate of ``response`` into one string."""
    multiple = len(response.candidates) > 1
    chunks: list[str] = []
    for i, candidate in enumerate(response.candidates, start=1):
        if multiple:
            chunks.append(f"{i}:")
        chunks.append(content_string(candidate.content))
    return "".join(chunks)


def content_string(content: Content | None) -> str:
    """Render the parts of a single content block, ``;``-separated."""
    if content is None or not content.parts:
        return ""
    return ";".join(part.text for part in content.parts)
