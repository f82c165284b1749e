"""Infrastructure: TCP transport speaking just enough telnet for a MUSH.

Option negotiation from the server is stripped from the byte stream and never
answered, so the session stays in plain NVT mode.
"""
import logging
import socket
from typing import Optional

from gravybot.domain.errors import SessionClosed

logger = logging.getLogger(__name__)

IAC = 255
DONT = 254
DO = 253
WONT = 252
WILL = 251
SB = 250
SE = 240

_DATA, _IAC, _OPTION, _SUBNEG, _SUBNEG_IAC = range(5)


class TelnetFilter:
    """Incremental IAC stripper; keeps state across reads."""

    def __init__(self):
        self._state = _DATA

    def feed(self, data: bytes) -> bytes:
        out = bytearray()
        for byte in data:
            if self._state == _DATA:
                if byte == IAC:
                    self._state = _IAC
                else:
                    out.append(byte)
            elif self._state == _IAC:
                if byte == IAC:
                    out.append(IAC)
                    self._state = _DATA
                elif byte in (WILL, WONT, DO, DONT):
                    self._state = _OPTION
                elif byte == SB:
                    self._state = _SUBNEG
                else:
                    self._state = _DATA
            elif self._state == _OPTION:
                logger.debug(f"Ignoring telnet option {byte}")
                self._state = _DATA
            elif self._state == _SUBNEG:
                if byte == IAC:
                    self._state = _SUBNEG_IAC
            elif self._state == _SUBNEG_IAC:
                self._state = _DATA if byte == SE else _SUBNEG
        return bytes(out)


class TelnetTransport:
    """Byte read/write primitives over one TCP connection.

    ``read`` returns ``b""`` when nothing arrived within ``read_timeout`` (or
    only negotiation bytes did) and raises ``SessionClosed`` once the server
    hangs up.
    """

    def __init__(self, host: str, port: int, read_timeout: float = 1.0,
                 connect_timeout: float = 10.0):
        self.host = host
        self.port = port
        self.read_timeout = read_timeout
        self.connect_timeout = connect_timeout
        self._sock: Optional[socket.socket] = None
        self._filter = TelnetFilter()

    @property
    def connected(self) -> bool:
        return self._sock is not None

    def connect(self) -> None:
        logger.info(f"🌐 Connecting to {self.host}:{self.port}")
        self._sock = socket.create_connection((self.host, self.port), timeout=self.connect_timeout)
        self._sock.settimeout(self.read_timeout)
        logger.info(f"✅ Connected to {self.host}:{self.port}")

    def read(self, size: int = 1) -> bytes:
        if self._sock is None:
            raise SessionClosed("transport is not connected")
        try:
            data = self._sock.recv(size)
        except socket.timeout:
            return b""
        if not data:
            raise SessionClosed(f"{self.host}:{self.port} closed the connection")
        return self._filter.feed(data)

    def write(self, text: str) -> None:
        if self._sock is None:
            raise SessionClosed("transport is not connected")
        # UTF-8 never emits 0xFF, so outgoing text needs no IAC escaping
        self._sock.sendall(text.encode("utf-8"))

    def close(self) -> None:
        if self._sock is not None:
            try:
                self._sock.close()
            finally:
                self._sock = None
                logger.info(f"🔌 Disconnected from {self.host}:{self.port}")

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
