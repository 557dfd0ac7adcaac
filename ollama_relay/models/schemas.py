from typing import Annotated, Any, Literal

from pydantic import BaseModel, Field, field_validator


class ChatRequest(BaseModel):
    """Request payload for the chat relay endpoint.

    Attributes:
        message: User's prompt, forwarded to the backend as-is after stripping.
    """

    message: str = Field(..., min_length=1)

    @field_validator("message", mode="before")
    @classmethod
    def strip_message(cls, v: str) -> str:
        """Strip whitespace from message before validation."""
        if isinstance(v, str):
            return v.strip()
        return v


class BackendFragment(BaseModel):
    """One text increment decoded from the backend's NDJSON stream.

    Attributes:
        text_delta: Text produced since the previous fragment.
        is_final: Whether the backend flagged this line as the last one.
    """

    text_delta: str
    is_final: bool = False


class ThinkingEvent(BaseModel):
    """Synthetic reasoning preamble shown before the answer."""

    kind: Literal["thinking"] = "thinking"
    text: str

    def to_wire(self) -> dict[str, Any]:
        return {"thinking": self.text}


class ThinkingDoneEvent(BaseModel):
    """Marks the end of the thinking phase."""

    kind: Literal["done_thinking"] = "done_thinking"

    def to_wire(self) -> dict[str, Any]:
        return {"doneThinking": True}


class ResponseEvent(BaseModel):
    """Cumulative answer text. The relay sends it once, as the terminal event."""

    kind: Literal["response"] = "response"
    text: str

    def to_wire(self) -> dict[str, Any]:
        return {"response": self.text}


class ErrorEvent(BaseModel):
    """User-facing failure sentence.

    Framed exactly like a response on the wire, so clients that only read
    `response` keep working.
    """

    kind: Literal["error"] = "error"
    text: str

    def to_wire(self) -> dict[str, Any]:
        return {"response": self.text}


RelayEvent = Annotated[
    ThinkingEvent | ThinkingDoneEvent | ResponseEvent | ErrorEvent,
    Field(discriminator="kind"),
]


def is_terminal(event: RelayEvent) -> bool:
    """Return True for events that end a turn's stream."""
    return isinstance(event, (ResponseEvent, ErrorEvent))
