"""Pydantic models for the relay's request, backend fragments, and events.

Models:
    - ChatRequest: Incoming chat request payload
    - BackendFragment: One decoded NDJSON text increment
    - ThinkingEvent, ThinkingDoneEvent, ResponseEvent, ErrorEvent: RelayEvent variants
"""

from ollama_relay.models.schemas import (
    BackendFragment,
    ChatRequest,
    ErrorEvent,
    RelayEvent,
    ResponseEvent,
    ThinkingDoneEvent,
    ThinkingEvent,
    is_terminal,
)
from ollama_relay.models.sse import event_from_wire, format_sse

__all__ = [
    "BackendFragment",
    "ChatRequest",
    "ErrorEvent",
    "RelayEvent",
    "ResponseEvent",
    "ThinkingDoneEvent",
    "ThinkingEvent",
    "event_from_wire",
    "format_sse",
    "is_terminal",
]
