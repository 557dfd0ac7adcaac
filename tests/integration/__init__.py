"""Integration tests for the /chat endpoint and the SSE client."""
