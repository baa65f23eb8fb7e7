"""Relay logic for opsrelay.

Turn processing for the three endpoints, independent of the WebSocket
transport.
"""

from opsrelay.relay.conversation import Conversation, single_turn
from opsrelay.relay.operations import OperationsRelay
from opsrelay.relay.protocol import DONE_SENTINEL, UNKNOWN_SENTINEL, parse_reply, render_reply

__all__ = [
    "Conversation",
    "DONE_SENTINEL",
    "OperationsRelay",
    "UNKNOWN_SENTINEL",
    "parse_reply",
    "render_reply",
    "single_turn",
]
