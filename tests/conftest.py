"""Pytest fixtures and shared test configuration.

Provides reusable fixtures for unit and integration tests.

Fixtures:
    - relay_config: RelayConfig pointing at a fake backend, no thinking delay
    - backend: Scriptable fake Ollama backend behind httpx.MockTransport
    - chat_relay: ChatRelay wired to the fake backend
    - app: FastAPI app using chat_relay
    - async_client: HTTPX client for API testing
"""

from collections.abc import AsyncGenerator, AsyncIterator, Callable

import httpx
import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from ollama_relay.api.app import create_app
from ollama_relay.relay.config import RelayConfig
from ollama_relay.relay.orchestrator import ChatRelay, get_chat_relay

HELLO_STREAM = (
    b'{"response":"Hel","done":false}\n',
    b'{"response":"lo","done":false}\n',
    b'{"response":"","done":true}\n',
)


async def iter_chunks(chunks: tuple[bytes, ...] | list[bytes]) -> AsyncIterator[bytes]:
    """Yield byte chunks as separate network reads."""
    for chunk in chunks:
        yield chunk


class FakeBackend:
    """Scriptable stand-in for Ollama's /api/generate endpoint.

    Attributes:
        chunks: Byte reads returned for the next request.
        status_code: HTTP status for the next request.
        error: Exception raised instead of responding, if set.
        body_factory: Overrides chunks with a custom async byte stream.
        requests: Every request received.
        responses: Every response returned.
    """

    def __init__(self) -> None:
        self.chunks: tuple[bytes, ...] | list[bytes] = HELLO_STREAM
        self.status_code = 200
        self.error: Exception | None = None
        self.body_factory: Callable[[], AsyncIterator[bytes]] | None = None
        self.requests: list[httpx.Request] = []
        self.responses: list[httpx.Response] = []

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.error is not None:
            raise self.error
        body = self.body_factory() if self.body_factory else iter_chunks(self.chunks)
        response = httpx.Response(self.status_code, content=body)
        self.responses.append(response)
        return response

    def refuse_connections(self) -> None:
        self.error = httpx.ConnectError("Connection refused")


@pytest.fixture
def relay_config() -> RelayConfig:
    """Relay configuration for tests.

    Returns:
        Config targeting a fake backend with the thinking delay disabled.
    """
    return RelayConfig(
        backend_url="http://ollama.test/api/generate",
        model_name="test-model",
        thinking_delay=0.0,
        connect_timeout=5.0,
        read_timeout=5.0,
    )


@pytest.fixture
def backend() -> FakeBackend:
    return FakeBackend()


@pytest.fixture
def chat_relay(relay_config: RelayConfig, backend: FakeBackend) -> ChatRelay:
    return ChatRelay(config=relay_config, transport=httpx.MockTransport(backend.handler))


@pytest.fixture
def app(chat_relay: ChatRelay) -> FastAPI:
    """FastAPI app whose /chat endpoint uses the test relay."""
    application = create_app()
    application.dependency_overrides[get_chat_relay] = lambda: chat_relay
    return application


@pytest.fixture
async def async_client(app: FastAPI) -> AsyncGenerator[AsyncClient]:
    """Create async HTTP client for API testing.

    Yields:
        Configured AsyncClient for making test requests.
    """
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
