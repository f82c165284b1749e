"""Domain layer: Command pattern for handling classified intents."""
from abc import ABC, abstractmethod
from typing import Protocol

from gravybot.domain.intent_classifier import Intent


class UrlShortener(Protocol):
    def shorten(self, url: str) -> str: ...  # pragma: no cover


class WeatherLookup(Protocol):
    def lookup_weather(self, query: str) -> str: ...  # pragma: no cover


class Translator(Protocol):
    def translate(self, source_lang: str, target_lang: str, text: str) -> str: ...  # pragma: no cover


class StockLookup(Protocol):
    def lookup_stock(self, query: str) -> str: ...  # pragma: no cover


class CommandHandler(ABC):
    """Handler interface for turning an intent into reply text."""

    @abstractmethod
    def handle(self, intent: Intent) -> str:
        """Handle the intent.

        Must return the reply to write back into the session (empty string
        for none). Upstream failures are reported inside the reply text.
        """
        pass
