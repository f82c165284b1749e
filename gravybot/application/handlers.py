"""Application layer: Command handlers turning intents into session commands."""
import logging
import re
from urllib.parse import urlsplit

from gravybot.domain.commands import (
    CommandHandler, StockLookup, Translator, UrlShortener, WeatherLookup,
)
from gravybot.domain.errors import AdapterError
from gravybot.domain.intent_classifier import Intent

logger = logging.getLogger(__name__)

TRIGGER_LAST_URL = "@trigger me/TRIGGER_LAST_URL\n"
HANGOUT_COMMAND = "@dolist me={gautoreturn on;hangout}\n"
HOME_COMMAND = "@dolist me={gautoreturn off;home}\n"


def pose(marker: str, text: str) -> str:
    """Frame ``text`` as a pose tagged with ``marker``, e.g. ``pose W> ...``."""
    text = text.rstrip("\r\n")
    return f"pose {marker}> {text}\n"


_BAD_ESCAPE = re.compile(r"%(?![0-9A-Fa-f]{2})")
_PORT = re.compile(r":\d*$")


def _check_escapes(component: str, value: str) -> None:
    if _BAD_ESCAPE.search(value):
        raise ValueError(f"invalid URL escape in {component}: {value!r}")


def _check_port(netloc: str) -> None:
    """Only an all-digit port is required; its range is not checked."""
    hostport = netloc.rpartition("@")[2]
    if hostport.startswith("["):
        hostport = hostport[hostport.find("]") + 1:]
    elif ":" in hostport:
        hostport = hostport[hostport.rfind(":"):]
    else:
        return
    if hostport and not _PORT.match(hostport):
        raise ValueError(f"invalid port {hostport!r} in {netloc!r}")


def parse_absolute_url(raw: str) -> str:
    """Normalize a swept URL, raising ValueError when it cannot be parsed.

    Bare ``www.`` hosts get an explicit ``http://`` scheme. A bad ``%``
    escape is rejected everywhere except the query, which stays raw.
    """
    if raw.lower().startswith("www"):
        raw = "http://" + raw
    parts = urlsplit(raw)
    if not parts.scheme:
        raise ValueError(f"no scheme in {raw!r}")
    if parts.netloc:
        _check_port(parts.netloc)
        _check_escapes("host", parts.netloc)
    _check_escapes("path", parts.path)
    _check_escapes("fragment", parts.fragment)
    return parts.geturl()


class UrlBatchHandler(CommandHandler):
    """Shorten every URL of a line and register each with the speaker."""

    def __init__(self, shortener: UrlShortener):
        self.shortener = shortener

    def handle(self, intent: Intent) -> str:
        try:
            long_urls = [parse_absolute_url(url) for url in intent.captures]
        except ValueError as e:
            logger.error(f"URL batch aborted, unparseable URL: {e}")
            return ""

        commands = []
        for long_url in long_urls:
            try:
                short_url = self.shortener.shorten(long_url)
            except AdapterError as e:
                logger.error(f"Skipping {long_url}: {e}")
                continue
            if not short_url:
                logger.error(f"Skipping {long_url}: empty short URL")
                continue
            commands.append(f"add_url {intent.speaker_id} {short_url} {long_url}\n")
            commands.append(TRIGGER_LAST_URL)

        reply = "".join(commands)
        logger.info(f"botData: {reply!r}")
        return reply


class FixedCommandHandler(CommandHandler):
    """Reply with a constant command, ignoring captures."""

    def __init__(self, command: str):
        self.command = command

    def handle(self, intent: Intent) -> str:
        return self.command


class WeatherHandler(CommandHandler):
    marker = "W"
    failure = "Error: weather api call failed."

    def __init__(self, weather: WeatherLookup):
        self.weather = weather

    def handle(self, intent: Intent) -> str:
        query = intent.captures[0]
        try:
            report = self.weather.lookup_weather(query)
        except AdapterError as e:
            logger.error(f"GRAVYWEATHER request fail: {e}")
            report = self.failure
        return pose(self.marker, report)


class TranslateHandler(CommandHandler):
    marker = "T"
    failure = "Error: translation failed."

    def __init__(self, translator: Translator):
        self.translator = translator

    def handle(self, intent: Intent) -> str:
        source_lang, target_lang, text = intent.captures
        try:
            translated = self.translator.translate(source_lang, target_lang, text)
        except AdapterError as e:
            logger.error(f"GRAVYTRANSLATE request fail: {e}")
            translated = self.failure
        return pose(self.marker, translated)


class StockHandler(CommandHandler):
    marker = "S"
    failure = "Error: stock quote api call failed."

    def __init__(self, stocks: StockLookup):
        self.stocks = stocks

    def handle(self, intent: Intent) -> str:
        query = intent.captures[0]
        try:
            quote = self.stocks.lookup_stock(query)
        except AdapterError as e:
            logger.error(f"GBS request fail: {e}")
            quote = self.failure
        return pose(self.marker, quote)
