"""Server-Sent Events framing for relay events.

One event per frame: ``data: <json>\\n\\n``. Decoding maps the wire keys back
onto the tagged event models; an ``error`` key is accepted for completeness
even though the relay itself frames errors as ``response``.
"""

import json
from typing import Any

from ollama_relay.models.schemas import (
    ErrorEvent,
    RelayEvent,
    ResponseEvent,
    ThinkingDoneEvent,
    ThinkingEvent,
)

DATA_PREFIX = "data: "


def format_sse(event: RelayEvent) -> str:
    """Frame one relay event for the outbound stream."""
    return f"{DATA_PREFIX}{json.dumps(event.to_wire(), ensure_ascii=False)}\n\n"


def event_from_wire(data: Any) -> RelayEvent | None:
    """Map a decoded frame payload onto an event, or None for unknown shapes."""
    if not isinstance(data, dict):
        return None
    if isinstance(data.get("thinking"), str):
        return ThinkingEvent(text=data["thinking"])
    if data.get("doneThinking") is True:
        return ThinkingDoneEvent()
    if isinstance(data.get("response"), str):
        return ResponseEvent(text=data["response"])
    if isinstance(data.get("error"), str):
        return ErrorEvent(text=data["error"])
    return None
