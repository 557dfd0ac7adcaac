"""Relay core: backend stream transcoding and turn orchestration.

Responsibilities:
    - Decoding Ollama's NDJSON stream into text fragments
    - Injecting the synthetic thinking phase
    - Accumulating the answer and framing state transitions as events
    - Collapsing backend failures into one user-facing error event

Maintains clean separation from the HTTP layer.
"""

from ollama_relay.relay.config import RelayConfig, get_relay_config
from ollama_relay.relay.errors import (
    BackendStatusError,
    BackendUnreachableError,
    FragmentDecodeError,
    MessageValidationError,
    RelayError,
    StreamExhaustedError,
)
from ollama_relay.relay.orchestrator import ChatRelay, StreamState, get_chat_relay
from ollama_relay.relay.transcoder import NDJSONTranscoder, decode_line

__all__ = [
    "BackendStatusError",
    "BackendUnreachableError",
    "ChatRelay",
    "FragmentDecodeError",
    "MessageValidationError",
    "NDJSONTranscoder",
    "RelayConfig",
    "RelayError",
    "StreamExhaustedError",
    "StreamState",
    "decode_line",
    "get_chat_relay",
    "get_relay_config",
]
