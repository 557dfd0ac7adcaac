"""SSE consumer for the /chat endpoint.

Drives one conversation turn: posts the message, feeds every received line
into a ConversationLog, and settles the turn whatever happens on the wire.
"""

import logging
import os

import httpx

from ollama_relay.client.reducer import ConversationLog, ConversationTurn

logger = logging.getLogger(__name__)

API_BASE_URL = os.getenv("API_BASE_URL", "http://localhost:8000")


async def stream_chat_turn(
    message: str,
    log: ConversationLog,
    base_url: str = API_BASE_URL,
    transport: httpx.AsyncBaseTransport | None = None,
    timeout: float = 120.0,
) -> ConversationTurn:
    """Send one message and fold the relay's event stream into the log.

    Transport failures never raise. Before the first answer frame they
    replace the in-progress turn with the client error message; after it
    the received answer is kept.

    Args:
        message: The user's message.
        log: Conversation log receiving the new turn.
        base_url: Relay server base URL.
        transport: Optional httpx transport (tests use ASGITransport).
        timeout: Per-operation httpx timeout in seconds (connect, read, write, pool).

    Returns:
        The settled assistant turn.
    """
    log.begin_turn(message)

    async with httpx.AsyncClient(
        base_url=base_url, timeout=timeout, transport=transport
    ) as client:
        try:
            async with client.stream(
                "POST",
                "/chat",
                json={"message": message},
                headers={"Accept": "text/event-stream"},
            ) as response:
                response.raise_for_status()
                async for line in response.aiter_lines():
                    log.apply_frame(line)
        except httpx.HTTPStatusError as e:
            logger.error(f"Error sending message: HTTP {e.response.status_code}")
            log.fail()
        except httpx.RequestError as e:
            logger.error(f"Error sending message: {e}")
            log.fail()
        finally:
            log.end_turn()

    return log.turns[-1]
