"""Turn an unframed byte stream into trimmed lines."""
import logging
from typing import Callable, Iterator

logger = logging.getLogger(__name__)

TERMINATOR = b"\n"


class LineAssembler:
    """Accumulate bytes from ``read`` and hand out one line per ``\\n``.

    ``read(n)`` returning ``b""`` means no data is ready yet and is retried.
    Whatever ``read`` raises (end of stream included) propagates, dropping any
    partially buffered line.
    """

    def __init__(self, read: Callable[[int], bytes]):
        self._read = read
        self._buffer = bytearray()
        # bytes read past the last terminator when a source over-delivers
        self._carry = b""

    @property
    def pending(self) -> bytes:
        return bytes(self._buffer) + self._carry

    def next_line(self) -> str:
        while True:
            if self._carry:
                chunk, self._carry = self._carry, b""
            else:
                chunk = self._read(1)
                if not chunk:
                    logger.debug("READ 0")
                    continue
            end = chunk.find(TERMINATOR)
            if end < 0:
                self._buffer += chunk
                continue
            self._buffer += chunk[:end + 1]
            self._carry = chunk[end + 1:]
            line = self._buffer.decode("utf-8", errors="replace").strip()
            self._buffer.clear()
            return line

    def lines(self) -> Iterator[str]:
        while True:
            yield self.next_line()
