"""Client side of the relay - SSE consumption and conversation state.

Responsibilities:
    - Decoding SSE frames into relay events
    - Folding events into an ordered conversation log
    - Driving one turn against the /chat endpoint with httpx

Contains no rendering. Presentation layers read ConversationLog.turns.
"""

from ollama_relay.client.reducer import (
    CLIENT_ERROR_MESSAGE,
    ConversationLog,
    ConversationTurn,
    TurnInProgressError,
    parse_frame,
)
from ollama_relay.client.stream import stream_chat_turn

__all__ = [
    "CLIENT_ERROR_MESSAGE",
    "ConversationLog",
    "ConversationTurn",
    "TurnInProgressError",
    "parse_frame",
    "stream_chat_turn",
]
