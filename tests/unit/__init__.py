"""Unit tests for individual components in isolation.

Coverage:
    - relay/: NDJSON transcoding, relay orchestration, configuration
    - models/: Request validation and SSE framing
    - client/: Conversation reducer merge rules
"""
