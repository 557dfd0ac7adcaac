"""Error taxonomy for the chat relay.

Backend-facing errors never reach the client as exceptions: the orchestrator
collapses them into a single terminal event carrying one of the user-facing
messages defined here.
"""

INVALID_MESSAGE_ERROR = "Please enter a valid message."
UNREACHABLE_MESSAGE = (
    "Cannot connect to the Ollama server. Please check that Ollama is running."
)
SERVER_ERROR_MESSAGE = "A server error occurred."


class RelayError(Exception):
    """Base class for relay errors."""

    pass


class MessageValidationError(RelayError):
    """Raised when the user message is missing, empty, or not text."""

    pass


class BackendUnreachableError(RelayError):
    """Raised when the backend connection cannot be established."""

    pass


class BackendStatusError(RelayError):
    """Raised when the backend answers with a non-success status."""

    def __init__(self, status_code: int) -> None:
        super().__init__(f"Ollama API error: {status_code}")
        self.status_code = status_code


class FragmentDecodeError(RelayError):
    """Raised when one NDJSON line cannot be decoded.

    Recovered locally by the transcoder; never surfaced to the user.
    """

    pass


class StreamExhaustedError(RelayError):
    """Raised when reading past the end of a finished transcoder."""

    pass


def user_message_for(error: Exception) -> str:
    """Map a relay failure to the sentence shown to the user."""
    if isinstance(error, BackendUnreachableError):
        return UNREACHABLE_MESSAGE
    return SERVER_ERROR_MESSAGE
