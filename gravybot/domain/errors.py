"""Domain layer: error taxonomy shared by the session, dispatch and adapters."""


class GravybotError(Exception):
    """Base class for all bot errors."""


class ConfigurationError(GravybotError):
    """Raised when settings cannot be built from flags/environment."""


class AdapterError(GravybotError):
    """An upstream API call failed (transport, status or payload)."""

    def __init__(self, adapter: str, message: str):
        super().__init__(f"{adapter}: {message}")
        self.adapter = adapter
        self.message = message


class SessionClosed(ConnectionError):
    """The remote end closed the connection."""
