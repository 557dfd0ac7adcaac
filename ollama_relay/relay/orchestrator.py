"""Relay orchestrator: one user message in, one SSE-ready event stream out.

Architecture decisions:

1. **Validation before streaming** - An empty or non-text message is knowable
   synchronously, so `relay()` raises before any generator or backend
   connection exists. The HTTP layer turns that into a 400.

2. **Fragment-triggered thinking phase** - The synthetic thinking preamble is
   injected when the first text fragment arrives, not when the turn starts.
   A backend that completes without producing text gets no thinking phase.

3. **Single terminal event** - The answer is accumulated and sent once as a
   cumulative `ResponseEvent`. Every failure collapses into one `ErrorEvent`.
   Nothing is retried: the user resubmits.

4. **Per-request client** - Each relay call opens and closes its own
   `httpx.AsyncClient`, so no connection or state outlives the request, and a
   disconnecting caller releases the backend connection on generator close.
"""

import asyncio
import logging
from collections.abc import AsyncGenerator, AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import dataclass, field

import httpx

from ollama_relay.models.schemas import (
    BackendFragment,
    ErrorEvent,
    RelayEvent,
    ResponseEvent,
    ThinkingDoneEvent,
    ThinkingEvent,
)
from ollama_relay.relay.config import RelayConfig, get_relay_config
from ollama_relay.relay.errors import (
    INVALID_MESSAGE_ERROR,
    BackendStatusError,
    BackendUnreachableError,
    MessageValidationError,
    StreamExhaustedError,
    user_message_for,
)
from ollama_relay.relay.transcoder import NDJSONTranscoder

logger = logging.getLogger(__name__)

THINKING_TEMPLATE = (
    'User says "{message}". I should analyze this and provide an appropriate '
    "response. Let me think about the best way to help."
)


def build_thinking_text(message: str) -> str:
    """Build the templated thinking preamble for a message."""
    return THINKING_TEMPLATE.format(message=message)


def validate_message(message: object) -> str:
    """Return the stripped message, or raise MessageValidationError."""
    if not isinstance(message, str) or not message.strip():
        raise MessageValidationError(INVALID_MESSAGE_ERROR)
    return message.strip()


@dataclass
class StreamState:
    """Per-request relay state. Never shared between requests.

    Attributes:
        message: The validated user message.
        parts: Text deltas received so far, in order.
        thinking_emitted: Whether the thinking phase has been injected.
    """

    message: str
    parts: list[str] = field(default_factory=list)
    thinking_emitted: bool = False

    @property
    def full_response(self) -> str:
        return "".join(self.parts)

    def claim_thinking(self) -> bool:
        """Return True exactly once, the first time it is called."""
        if self.thinking_emitted:
            return False
        self.thinking_emitted = True
        return True

    def append(self, fragment: BackendFragment) -> None:
        self.parts.append(fragment.text_delta)


class ChatRelay:
    """Relays one chat turn from the Ollama backend to an event stream."""

    def __init__(
        self,
        config: RelayConfig | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the relay.

        Args:
            config: Optional relay configuration.
                    Loads from environment if not provided.
            transport: Optional httpx transport for the backend connection.
        """
        self._config = config or get_relay_config()
        self._transport = transport

    @property
    def config(self) -> RelayConfig:
        return self._config

    def relay(self, user_message: object) -> AsyncGenerator[RelayEvent]:
        """Start relaying a message.

        Args:
            user_message: The user's message.

        Returns:
            Async generator of relay events, ending with exactly one
            ResponseEvent or ErrorEvent.

        Raises:
            MessageValidationError: If the message is empty or not text.
        """
        message = validate_message(user_message)
        return self._stream(StreamState(message=message))

    async def _stream(self, state: StreamState) -> AsyncGenerator[RelayEvent]:
        logger.info(
            f"Relaying message ({len(state.message)} chars) to model {self._config.model_name}"
        )
        try:
            async with self._open_backend(state.message) as response:
                async for fragment in NDJSONTranscoder(response.aiter_bytes()):
                    if state.claim_thinking():
                        yield ThinkingEvent(text=build_thinking_text(state.message))
                        await asyncio.sleep(self._config.thinking_delay)
                        yield ThinkingDoneEvent()

                    state.append(fragment)
                    if fragment.is_final:
                        break
        except StreamExhaustedError:
            raise
        except Exception as e:
            logger.error(f"Chat relay error: {e}")
            yield ErrorEvent(text=user_message_for(e))
            return

        logger.info(f"Relay complete: {len(state.full_response)} chars")
        yield ResponseEvent(text=state.full_response)

    @asynccontextmanager
    async def _open_backend(self, prompt: str) -> AsyncIterator[httpx.Response]:
        """Open a streaming generate request and yield the live response.

        Raises:
            BackendUnreachableError: If the connection cannot be established.
            BackendStatusError: If the backend answers with a non-2xx status.
        """
        timeout = httpx.Timeout(
            self._config.connect_timeout, read=self._config.read_timeout
        )
        payload = {
            "model": self._config.model_name,
            "prompt": prompt,
            "stream": True,
        }

        async with httpx.AsyncClient(
            timeout=timeout, transport=self._transport
        ) as client:
            request = client.build_request(
                "POST", self._config.backend_url, json=payload
            )
            try:
                response = await client.send(request, stream=True)
            except httpx.TransportError as e:
                raise BackendUnreachableError(str(e)) from e

            try:
                if not response.is_success:
                    raise BackendStatusError(response.status_code)
                yield response
            finally:
                await response.aclose()


# Module-level singleton instance
_chat_relay: ChatRelay | None = None


def get_chat_relay() -> ChatRelay:
    """Get or create the global chat relay.

    Returns:
        The ChatRelay instance.
    """
    global _chat_relay
    if _chat_relay is None:
        _chat_relay = ChatRelay()
    return _chat_relay
