"""Application layer: the session driver.

One session per connection::

    CONNECTING -> LOGGING_IN -> STREAMING -> CLOSED

Every input line is acknowledged with ``@@`` before its reply (if any) is
written, and lines are handled strictly one after another.
"""
import logging
from dataclasses import asdict, dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Optional, Protocol

from gravybot.application.command_processor import CommandProcessor
from gravybot.application.line_assembler import LineAssembler
from gravybot.config import Settings

logger = logging.getLogger(__name__)

ACKNOWLEDGEMENT = "@@\n"


class Transport(Protocol):
    @property
    def connected(self) -> bool: ...  # pragma: no cover

    def connect(self) -> None: ...  # pragma: no cover

    def read(self, size: int = 1) -> bytes: ...  # pragma: no cover

    def write(self, text: str) -> None: ...  # pragma: no cover

    def close(self) -> None: ...  # pragma: no cover


class SessionState(str, Enum):
    CONNECTING = "connecting"
    LOGGING_IN = "logging_in"
    STREAMING = "streaming"
    CLOSED = "closed"


@dataclass
class SessionStatus:
    """Live counters for the current session, read by the status server."""
    state: SessionState = SessionState.CONNECTING
    lines_processed: int = 0
    replies_sent: int = 0
    connected_at: Optional[datetime] = None
    last_line_at: Optional[datetime] = None
    last_error: Optional[str] = None

    def snapshot(self) -> dict:
        data = asdict(self)
        data["state"] = self.state.value
        for key in ("connected_at", "last_line_at"):
            if data[key] is not None:
                data[key] = data[key].isoformat()
        return data


class SessionDriver:
    def __init__(self, transport: Transport, processor: CommandProcessor,
                 settings: Settings, status: Optional[SessionStatus] = None):
        self.transport = transport
        self.processor = processor
        self.settings = settings
        self.status = status or SessionStatus()

    @property
    def state(self) -> SessionState:
        return self.status.state

    def _enter(self, state: SessionState) -> None:
        logger.info(f"Session state {self.status.state.value} -> {state.value}")
        self.status.state = state

    def run(self) -> None:
        """Run the session until the transport fails.

        Always ends in CLOSED and re-raises the transport error (including
        ``SessionClosed`` at end of stream) to the caller.
        """
        try:
            self._enter(SessionState.CONNECTING)
            if not self.transport.connected:
                self.transport.connect()
            self.status.connected_at = datetime.now(timezone.utc)

            self._enter(SessionState.LOGGING_IN)
            self.login()

            self._enter(SessionState.STREAMING)
            assembler = LineAssembler(self.transport.read)
            for line in assembler.lines():
                self.handle_line(line)
        except OSError as e:
            self.status.last_error = f"{e.__class__.__name__}: {e}"
            logger.error(f"❌ Session ended: {self.status.last_error}")
            raise
        finally:
            self._enter(SessionState.CLOSED)
            self.transport.close()

    def login(self) -> None:
        """Send the credential line; the reply is never checked."""
        username = self.settings.username
        self.send(f"connect {username} {self.settings.password}\n",
                  log_as=f"connect {username} <password>")

    def handle_line(self, line: str) -> str:
        logger.info(line)
        reply = self.processor.process_line(line)

        self.send(ACKNOWLEDGEMENT)
        if reply and self.send(reply):
            self.status.replies_sent += 1

        self.status.lines_processed += 1
        self.status.last_line_at = datetime.now(timezone.utc)
        return reply

    def send(self, data: str, log_as: Optional[str] = None) -> bool:
        """Write ``data``; False when the write failed."""
        logger.info(log_as if log_as is not None else data.rstrip("\n"))
        try:
            self.transport.write(data)
        except OSError as e:
            # a dead connection surfaces on the next read
            logger.error(f"❌ Write failed: {e}")
            return False
        return True
