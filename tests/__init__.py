"""Test package for Ollama Relay.

Structure:
    - unit/: Transcoder, orchestrator, reducer, schema, and config tests
    - integration/: End-to-end tests through the FastAPI app

The Ollama backend is always simulated with httpx.MockTransport.
Leverages pytest with pytest-check for soft assertions.
"""
