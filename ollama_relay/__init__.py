"""Ollama Relay - streaming chat relay for a local Ollama backend.

Takes one user message, forwards it to Ollama's NDJSON generate endpoint,
adds a short synthetic thinking phase, and re-frames the generation as a
Server-Sent Events stream.

Components:
    - relay: backend stream transcoding and relay orchestration
    - models: request, fragment, and event schemas
    - api: FastAPI application and the /chat endpoint
    - client: SSE consumer and conversation reducer
"""

__version__ = "0.1.0"
