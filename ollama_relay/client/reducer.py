"""Client-side reduction of relay events into a conversation log.

The log holds one in-progress assistant turn per submission. Events are
merged into that turn; the rest of the log is never touched.

    Thinking      -> set thinking_text, stay thinking
    ThinkingDone  -> no change; the next Response ends the thinking phase
    Response      -> first one sets content and clears is_thinking,
                     later ones replace content with the cumulative text
    Error         -> replace the turn with a plain assistant turn
"""

import json
import logging
from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field

from ollama_relay.models.schemas import (
    ErrorEvent,
    RelayEvent,
    ResponseEvent,
    ThinkingDoneEvent,
    ThinkingEvent,
)
from ollama_relay.models.sse import DATA_PREFIX, event_from_wire

logger = logging.getLogger(__name__)

CLIENT_ERROR_MESSAGE = "Sorry, an error occurred. Please try again."


class TurnInProgressError(Exception):
    """Raised when a new turn starts while the previous one is still thinking."""

    pass


class ConversationTurn(BaseModel):
    """A single entry in the conversation log.

    Attributes:
        role: Who produced the turn.
        content: Message text (cumulative for assistant turns).
        created_at: When the turn was appended.
        thinking_text: Thinking preamble shown above the answer, if any.
        is_thinking: Whether the turn is still waiting for its first content.
    """

    role: Literal["user", "assistant"]
    content: str = ""
    created_at: datetime = Field(default_factory=datetime.now)
    thinking_text: str | None = None
    is_thinking: bool = False


def parse_frame(line: str) -> RelayEvent | None:
    """Decode one SSE line into a relay event.

    Returns None for blank lines, non-data lines, and unparseable payloads.
    """
    if not line.startswith(DATA_PREFIX):
        if line.strip():
            logger.debug(f"Ignoring non-data SSE line: {line[:80]}")
        return None

    try:
        data = json.loads(line[len(DATA_PREFIX) :])
    except json.JSONDecodeError as e:
        logger.warning(f"Error parsing SSE data: {e}")
        return None

    event = event_from_wire(data)
    if event is None:
        logger.warning(f"Unrecognized SSE payload: {data!r}")
    return event


class ConversationLog:
    """Ordered conversation turns with a single mutable in-progress turn."""

    def __init__(self) -> None:
        self._turns: list[ConversationTurn] = []
        self._active: int | None = None

    @property
    def turns(self) -> list[ConversationTurn]:
        return list(self._turns)

    @property
    def in_progress(self) -> ConversationTurn | None:
        """The assistant turn currently receiving events, if any."""
        if self._active is None:
            return None
        return self._turns[self._active]

    def begin_turn(self, message: str) -> ConversationTurn:
        """Append the user's message and an assistant placeholder.

        Raises:
            ValueError: If the message is blank.
            TurnInProgressError: If the previous turn is still thinking.
        """
        if not message.strip():
            raise ValueError("Message is empty")
        if any(turn.is_thinking for turn in self._turns):
            raise TurnInProgressError("Previous turn has not received a response")

        self._turns.append(ConversationTurn(role="user", content=message))
        placeholder = ConversationTurn(
            role="assistant", thinking_text="", is_thinking=True
        )
        self._turns.append(placeholder)
        self._active = len(self._turns) - 1
        return placeholder

    def apply(self, event: RelayEvent) -> None:
        """Merge one event into the in-progress turn."""
        turn = self.in_progress
        if turn is None:
            logger.warning(f"Dropping {event.kind} event: no turn in progress")
            return

        if isinstance(event, ThinkingEvent):
            if turn.is_thinking:
                self._replace(turn.model_copy(update={"thinking_text": event.text}))
        elif isinstance(event, ThinkingDoneEvent):
            # Transitional marker only
            return
        elif isinstance(event, ResponseEvent):
            if turn.is_thinking:
                self._replace(
                    turn.model_copy(update={"content": event.text, "is_thinking": False})
                )
            else:
                self._replace(turn.model_copy(update={"content": event.text}))
        elif isinstance(event, ErrorEvent):
            self._replace(ConversationTurn(role="assistant", content=event.text))

    def apply_frame(self, line: str) -> RelayEvent | None:
        """Parse and apply one SSE line. Unparseable lines are skipped."""
        event = parse_frame(line)
        if event is not None:
            self.apply(event)
        return event

    def fail(self, text: str = CLIENT_ERROR_MESSAGE) -> None:
        """Replace the in-progress turn with an error reply.

        No-op once the turn has received its answer.
        """
        turn = self.in_progress
        if turn is None or not turn.is_thinking:
            return
        self.apply(ErrorEvent(text=text))

    def end_turn(self) -> None:
        """Close the in-progress turn.

        A turn that never received content is settled as an error so the
        log never keeps a thinking turn after its stream closed.
        """
        turn = self.in_progress
        if turn is not None and turn.is_thinking:
            logger.warning("Stream closed before any response; marking turn failed")
            self.fail()
        self._active = None

    def clear(self) -> None:
        self._turns.clear()
        self._active = None

    def _replace(self, turn: ConversationTurn) -> None:
        self._turns[self._active] = turn
