"""
Incremental decoder for the proxy's Server-Sent Events stream.
Reassembles lines split across network chunks and extracts text deltas.
"""
import codecs
import json
from typing import Optional

from utils.logger import client_logger

SSE_DATA_PREFIX = "data:"
SSE_DONE_LINE = "data: [DONE]"


def extract_delta(payload) -> Optional[str]:
    """Return `choices[0].delta.content` when present and non-empty."""
    if not isinstance(payload, dict):
        return None

    choices = payload.get("choices")
    if not isinstance(choices, list) or not choices:
        return None

    first = choices[0]
    if not isinstance(first, dict):
        return None

    delta = first.get("delta")
    if not isinstance(delta, dict):
        return None

    content = delta.get("content")
    if isinstance(content, str) and content:
        return content
    return None


class StreamDecoder:
    """Turns arbitrarily chunked SSE bytes into ordered delta fragments.

    Only the trailing, not yet newline-terminated fragment is held back
    between calls to `feed`. The terminator line ends decoding; anything
    fed afterwards is ignored.
    """

    def __init__(self):
        self.buffer = ""
        self.done = False
        self._decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")

    def feed(self, chunk: bytes | str) -> list[str]:
        """Consume one received chunk and return the deltas completed by it."""
        if self.done:
            return []

        if isinstance(chunk, bytes):
            chunk = self._decoder.decode(chunk)

        self.buffer += chunk
        lines = self.buffer.split("\n")
        self.buffer = lines.pop()

        return self._process_lines(lines)

    def close(self) -> list[str]:
        """Flush at end of stream, processing a final unterminated line."""
        if self.done:
            return []

        tail = self.buffer + self._decoder.decode(b"", final=True)
        self.buffer = ""
        return self._process_lines([tail]) if tail else []

    def _process_lines(self, lines: list[str]) -> list[str]:
        deltas = []
        for raw_line in lines:
            line = raw_line.strip()

            if not line:
                continue

            if line == SSE_DONE_LINE:
                self.done = True
                self.buffer = ""
                break

            if not line.startswith(SSE_DATA_PREFIX):
                continue

            data = line[len(SSE_DATA_PREFIX):].strip()
            try:
                payload = json.loads(data)
            except json.JSONDecodeError as e:
                client_logger.warning(f"Skipping malformed stream frame: {e} ({data[:80]!r})")
                continue

            delta = extract_delta(payload)
            if delta:
                deltas.append(delta)

        return deltas
