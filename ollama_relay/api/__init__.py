"""FastAPI endpoints for the chat relay.

Endpoints:
    - GET /health: Service health status
    - POST /chat: Relay one message as a Server-Sent Events stream
"""

from ollama_relay.api.app import app, create_app

__all__ = ["app", "create_app"]
