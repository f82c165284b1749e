"""
Pytest configuration and shared fixtures for Gravybot tests.
"""
import pytest

from gravybot.application.command_processor import CommandProcessor
from gravybot.config import Settings
from gravybot.domain.errors import AdapterError, SessionClosed
from gravybot.services import Adapters, build_command_processor


class FakeTransport:
    """Scripted transport: serves ``script`` items one read at a time.

    Items are bytes (returned as-is, ``b""`` meaning "not ready") or
    exceptions (raised). Once the script runs out the remote end "hangs up".
    """

    def __init__(self, script=None, connected=False):
        self.script = list(script or [])
        self.writes = []
        self.connected = connected
        self.closed = False
        self.connect_calls = 0

    def connect(self):
        self.connect_calls += 1
        self.connected = True

    def read(self, size=1):
        if not self.script:
            raise SessionClosed("end of script")
        item = self.script.pop(0)
        if isinstance(item, BaseException):
            raise item
        return item

    def write(self, text):
        self.writes.append(text)

    def close(self):
        self.closed = True
        self.connected = False


def byte_script(data: bytes):
    """Split ``data`` into single-byte reads like a slow server would."""
    return [data[i:i + 1] for i in range(len(data))]


class StubShortener:
    def __init__(self, fail_for=()):
        self.calls = []
        self.fail_for = set(fail_for)

    def shorten(self, url):
        self.calls.append(url)
        if url in self.fail_for:
            raise AdapterError("yirp", "URL API returned code: 500")
        return f"https://yirp.org/{len(self.calls)}"


class StubWeather:
    def __init__(self, report="Austin, Texas: Sunny 90.0F 40.0%% 5.0mph S", error=False):
        self.report = report
        self.error = error
        self.calls = []

    def lookup_weather(self, query):
        self.calls.append(query)
        if self.error:
            raise AdapterError("weather", "request failed")
        return self.report


class StubTranslator:
    def __init__(self, error=False):
        self.error = error
        self.calls = []

    def translate(self, source_lang, target_lang, text):
        self.calls.append((source_lang, target_lang, text))
        if self.error:
            raise AdapterError("translate", "malformed response")
        return f"[{target_lang}] {text}"


class StubStocks:
    def __init__(self, quote="AAPL(Apple Inc): $189.50", error=False):
        self.quote = quote
        self.error = error
        self.calls = []

    def lookup_stock(self, query):
        self.calls.append(query)
        if self.error:
            raise AdapterError("finnhub", "request failed")
        return self.quote


@pytest.fixture
def settings():
    return Settings(
        server_address="mush.example.org:4201",
        username="Gravybot",
        password="s3cret",
        yirp_api_key="yirp_test_key",
        weather_api_key="weather_test_key",
        finnhub_api_key="finnhub_test_key",
        http_timeout=5.0,
    )


@pytest.fixture
def adapters():
    return Adapters(
        shortener=StubShortener(),
        weather=StubWeather(),
        translator=StubTranslator(),
        stocks=StubStocks(),
    )


@pytest.fixture
def processor(settings, adapters) -> CommandProcessor:
    return build_command_processor(settings, adapters)


@pytest.fixture
def mock_response():
    """Factory for fake ``requests`` responses."""
    from unittest.mock import MagicMock

    def _make(status_code=200, json_data=None, text="", json_error=None):
        response = MagicMock()
        response.status_code = status_code
        response.text = text
        if json_error is not None:
            response.json.side_effect = json_error
        else:
            response.json.return_value = json_data
        return response

    return _make
