"""Transcoder for Ollama's newline-delimited JSON stream.

Turns raw byte reads from the backend into discrete text fragments.
Network reads do not respect line boundaries, so bytes are buffered until a
full line is available; the incomplete tail waits for the next read.
Decoding happens per complete line, which also keeps multi-byte UTF-8
characters split across reads intact.
"""

import json
import logging
from collections import deque
from collections.abc import AsyncIterable, AsyncIterator
from typing import Any

from ollama_relay.models.schemas import BackendFragment
from ollama_relay.relay.errors import FragmentDecodeError, StreamExhaustedError

logger = logging.getLogger(__name__)

LINE_SEPARATOR = b"\n"


def decode_line(line: bytes) -> dict[str, Any]:
    """Decode one NDJSON line into a JSON object.

    Args:
        line: A complete line without its trailing newline.

    Returns:
        The decoded object.

    Raises:
        FragmentDecodeError: If the line is not UTF-8 JSON or not an object.
    """
    try:
        data = json.loads(line.decode("utf-8"))
    except ValueError as e:
        raise FragmentDecodeError(f"Malformed NDJSON line: {e}") from e

    if not isinstance(data, dict):
        raise FragmentDecodeError(
            f"Expected a JSON object, got {type(data).__name__}"
        )
    return data


class NDJSONTranscoder:
    """Lazy, single-use async iterator of BackendFragment.

    A line with a non-empty ``response`` string yields a fragment. A line
    with ``done: true`` ends the sequence; nothing after it is read.
    Malformed lines are logged and skipped.

    Usage:
        transcoder = NDJSONTranscoder(response.aiter_bytes())
        async for fragment in transcoder:
            ...
    """

    def __init__(self, byte_stream: AsyncIterable[bytes]) -> None:
        self._reader: AsyncIterator[bytes] = aiter(byte_stream)
        self._buffer = bytearray()
        self._pending: deque[BackendFragment] = deque()
        self._finished = False
        self._exhausted = False
        self.skipped_lines = 0

    def __aiter__(self) -> "NDJSONTranscoder":
        return self

    async def __anext__(self) -> BackendFragment:
        if self._exhausted:
            raise StreamExhaustedError("Backend stream already exhausted")

        while not self._pending and not self._finished:
            await self._read_more()

        if self._pending:
            return self._pending.popleft()

        self._exhausted = True
        raise StopAsyncIteration

    @property
    def exhausted(self) -> bool:
        return self._exhausted

    async def aclose(self) -> None:
        """Close the underlying byte stream if it supports closing."""
        self._finished = True
        close = getattr(self._reader, "aclose", None)
        if close is not None:
            await close()

    async def _read_more(self) -> None:
        try:
            chunk = await anext(self._reader)
        except StopAsyncIteration:
            self._finished = True
            # Flush an unterminated last line
            tail = bytes(self._buffer)
            self._buffer.clear()
            self._consume_line(tail)
            return

        self._buffer.extend(chunk)
        while not self._finished:
            index = self._buffer.find(LINE_SEPARATOR)
            if index < 0:
                break
            line = bytes(self._buffer[:index])
            del self._buffer[: index + 1]
            self._consume_line(line)

    def _consume_line(self, line: bytes) -> None:
        if not line.strip():
            return

        try:
            data = decode_line(line)
        except FragmentDecodeError as e:
            self.skipped_lines += 1
            logger.warning(f"Skipping backend line: {e}")
            return

        if "error" in data:
            logger.warning(f"Backend reported an error line: {data['error']}")

        done = data.get("done") is True
        delta = data.get("response")
        if isinstance(delta, str) and delta:
            self._pending.append(BackendFragment(text_delta=delta, is_final=done))
            logger.debug(f"Fragment: {len(delta)} chars (final={done})")

        if done:
            self._finished = True
            self._buffer.clear()
