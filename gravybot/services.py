"""Service construction: adapters, handlers and the command processor.

Everything is built from one Settings instance so that tests and the entry
point can wire their own collaborators without touching module globals.
"""
import logging
from dataclasses import dataclass
from typing import Optional

from gravybot.application.command_processor import CommandProcessor
from gravybot.application.handlers import (
    HANGOUT_COMMAND, HOME_COMMAND,
    FixedCommandHandler, StockHandler, TranslateHandler, UrlBatchHandler, WeatherHandler,
)
from gravybot.application.session import SessionDriver, SessionStatus
from gravybot.config import Settings
from gravybot.domain import intent_classifier as intents
from gravybot.domain.commands import StockLookup, Translator, UrlShortener, WeatherLookup
from gravybot.infrastructure.transport import TelnetTransport
from finnhub_integrations.finnhub_client import FinnhubClient
from google_integrations.translate_client import TranslateClient
from weather_integrations.weather_client import WeatherClient
from yirp_integrations.yirp_client import YirpClient

logger = logging.getLogger(__name__)


@dataclass
class Adapters:
    shortener: UrlShortener
    weather: WeatherLookup
    translator: Translator
    stocks: StockLookup


def build_adapters(settings: Settings) -> Adapters:
    timeout = settings.http_timeout
    return Adapters(
        shortener=YirpClient(settings.yirp_api_address, settings.yirp_api_key, timeout=timeout),
        weather=WeatherClient(settings.weather_api_key, timeout=timeout),
        translator=TranslateClient(timeout=timeout),
        stocks=FinnhubClient(settings.finnhub_api_key, timeout=timeout),
    )


def build_command_processor(settings: Settings, adapters: Optional[Adapters] = None) -> CommandProcessor:
    adapters = adapters or build_adapters(settings)
    handlers = {
        intents.URL_BATCH: UrlBatchHandler(adapters.shortener),
        intents.HANGOUT: FixedCommandHandler(HANGOUT_COMMAND),
        intents.HOME: FixedCommandHandler(HOME_COMMAND),
        intents.TRANSLATE: TranslateHandler(adapters.translator),
        intents.WEATHER: WeatherHandler(adapters.weather),
        intents.STOCK: StockHandler(adapters.stocks),
    }
    classifier = intents.RegexIntentClassifier(intents.build_rules(settings.trigger_word))
    logger.info(f"🤖 Command processor ready with intents: {', '.join(handlers)}")
    return CommandProcessor(handlers, intent_classifier=classifier)


def build_session(settings: Settings, transport=None, adapters: Optional[Adapters] = None,
                  status: Optional[SessionStatus] = None) -> SessionDriver:
    if transport is None:
        transport = TelnetTransport(settings.host, settings.port,
                                    read_timeout=settings.read_timeout)
    return SessionDriver(transport, build_command_processor(settings, adapters), settings, status)
