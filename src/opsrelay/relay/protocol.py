"""Sentinel protocol of the operations endpoint.

The operations model answers with literal command lines, except for two
fixed strings used as control signals. Clients may also send those
strings themselves. Matching is exact; no trimming or case folding.
"""

from __future__ import annotations

from opsrelay.domain.models import OperationsReply, ShellCommand, TaskDone, UnknownIntent

DONE_SENTINEL = "echo true"
UNKNOWN_SENTINEL = "echo false"


def parse_reply(text: str) -> OperationsReply:
    """Classify a model reply (or inbound message) by its sentinel."""
    if text == DONE_SENTINEL:
        return TaskDone()
    if text == UNKNOWN_SENTINEL:
        return UnknownIntent()
    return ShellCommand(text=text)


def render_reply(reply: OperationsReply) -> str:
    """Turn a tagged reply back into its wire literal."""
    if isinstance(reply, TaskDone):
        return DONE_SENTINEL
    if isinstance(reply, UnknownIntent):
        return UNKNOWN_SENTINEL
    return reply.text
