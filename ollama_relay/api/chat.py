"""Chat relay endpoint.

Validates the incoming message synchronously, then streams relay events to
the client as Server-Sent Events.
"""

import logging
from collections.abc import AsyncGenerator

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import JSONResponse, Response, StreamingResponse
from pydantic import ValidationError

from ollama_relay.models.schemas import ChatRequest, RelayEvent
from ollama_relay.models.sse import format_sse
from ollama_relay.relay.errors import (
    INVALID_MESSAGE_ERROR,
    SERVER_ERROR_MESSAGE,
    MessageValidationError,
)
from ollama_relay.relay.orchestrator import ChatRelay, get_chat_relay

logger = logging.getLogger(__name__)

router = APIRouter(tags=["chat"])

SSE_HEADERS = {
    "Cache-Control": "no-cache",
    "Connection": "keep-alive",
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET, POST, PUT, DELETE, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type",
}


def _error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


async def _event_frames(
    events: AsyncGenerator[RelayEvent],
) -> AsyncGenerator[str]:
    """Frame relay events, closing the relay when the client goes away."""
    try:
        async for event in events:
            yield format_sse(event)
    finally:
        await events.aclose()


@router.post("/chat")
async def chat(
    request: Request,
    relay: ChatRelay = Depends(get_chat_relay),
) -> Response:
    """Relay one chat message to the backend as an SSE stream.

    Body:
        {"message": "<text>"}

    Returns:
        200 text/event-stream of `data: <json>` frames, ending with a
        `response` frame carrying the full answer or an error sentence.

    Raises:
        400: Missing, empty, or non-text message, or a body that is not JSON.
        500: Unexpected failure before the stream starts.
    """
    try:
        payload = await request.json()
    except ValueError:
        logger.warning("Rejected chat request: body is not valid JSON")
        return _error_response(status.HTTP_400_BAD_REQUEST, INVALID_MESSAGE_ERROR)

    try:
        chat_request = ChatRequest.model_validate(payload)
        events = relay.relay(chat_request.message)
    except (ValidationError, MessageValidationError) as e:
        logger.warning(f"Rejected chat request: {e}")
        return _error_response(status.HTTP_400_BAD_REQUEST, INVALID_MESSAGE_ERROR)
    except Exception as e:
        logger.error(f"Chat API error: {e}", exc_info=True)
        return _error_response(
            status.HTTP_500_INTERNAL_SERVER_ERROR, SERVER_ERROR_MESSAGE
        )

    return StreamingResponse(
        _event_frames(events),
        media_type="text/event-stream",
        headers=SSE_HEADERS,
    )
