"""
Unit tests for the upstream API clients (HTTP calls patched out).
"""
from unittest.mock import patch

import pytest
import requests

from finnhub_integrations.finnhub_client import FinnhubClient
from google_integrations.translate_client import TranslateClient
from gravybot.domain.errors import AdapterError
from weather_integrations.weather_client import WeatherClient
from yirp_integrations.yirp_client import YirpClient

WEATHER_US = {
    "location": {"name": "Austin", "region": "Texas", "country": "United States of America",
                 "lat": 30.27, "lon": -97.74},
    "current": {"last_updated": "2024-06-01 12:00", "temp_c": 32.2, "temp_f": 90.0,
                "condition": {"text": "Sunny"}, "wind_mph": 5.6, "wind_kph": 9.0,
                "wind_dir": "SSE", "humidity": 40},
}

WEATHER_UK = {
    "location": {"name": "London", "region": "City of London", "country": "United Kingdom"},
    "current": {"temp_c": 15.0, "temp_f": 59.0, "condition": {"text": "Light rain"},
                "wind_mph": 8.1, "wind_kph": 13.0, "wind_dir": "W", "humidity": 82},
}


class TestYirpClient:
    def setup_method(self):
        self.client = YirpClient("https://api.yirp.org/v1/shorten", "yirp_key", timeout=3)

    @patch("yirp_integrations.yirp_client.requests.post")
    def test_shorten(self, mock_post, mock_response):
        mock_post.return_value = mock_response(201, {"short_url": "https://yirp.org/abc",
                                                     "long_url": "http://example.com"})

        assert self.client.shorten("http://example.com") == "https://yirp.org/abc"
        mock_post.assert_called_once_with(
            "https://api.yirp.org/v1/shorten",
            json={"api_key": "yirp_key", "long_url": "http://example.com"},
            timeout=3,
        )

    @patch("yirp_integrations.yirp_client.requests.post")
    def test_error_status(self, mock_post, mock_response):
        mock_post.return_value = mock_response(500, text="oops")
        with pytest.raises(AdapterError, match="500"):
            self.client.shorten("http://example.com")

    @patch("yirp_integrations.yirp_client.requests.post")
    def test_timeout(self, mock_post):
        mock_post.side_effect = requests.exceptions.Timeout("slow")
        with pytest.raises(AdapterError):
            self.client.shorten("http://example.com")

    @patch("yirp_integrations.yirp_client.requests.post")
    def test_malformed_body(self, mock_post, mock_response):
        mock_post.return_value = mock_response(200, {"unexpected": True})
        with pytest.raises(AdapterError, match="malformed"):
            self.client.shorten("http://example.com")


class TestWeatherClient:
    def setup_method(self):
        self.client = WeatherClient("weather_key", timeout=4)

    @patch("weather_integrations.weather_client.requests.get")
    def test_us_report_uses_imperial_units(self, mock_get, mock_response):
        mock_get.return_value = mock_response(200, WEATHER_US)

        assert self.client.lookup_weather("Austin TX") == "Austin, Texas: Sunny 90.0F 40.0%% 5.6mph SSE"
        _, kwargs = mock_get.call_args
        assert kwargs["params"] == {"key": "weather_key", "q": "Austin TX", "aqi": "no"}
        assert kwargs["timeout"] == 4

    @patch("weather_integrations.weather_client.requests.get")
    def test_other_countries_use_metric(self, mock_get, mock_response):
        mock_get.return_value = mock_response(200, WEATHER_UK)
        assert self.client.lookup_weather("London") == (
            "London, United Kingdom: Light rain 15.0C 82.0%% 13.0kph W"
        )

    @patch("weather_integrations.weather_client.requests.get")
    def test_unknown_location(self, mock_get, mock_response):
        mock_get.return_value = mock_response(400)
        assert self.client.lookup_weather("Atlantis") == (
            "Weather error: Atlantis not found. Try using a city state or city country pair."
        )

    @patch("weather_integrations.weather_client.requests.get")
    def test_other_error_status(self, mock_get, mock_response):
        mock_get.return_value = mock_response(403)
        assert self.client.lookup_weather("Austin") == "Weather error: API returned code: 403"

    @patch("weather_integrations.weather_client.requests.get")
    def test_connection_error(self, mock_get):
        mock_get.side_effect = requests.exceptions.ConnectionError("down")
        with pytest.raises(AdapterError):
            self.client.lookup_weather("Austin")

    @patch("weather_integrations.weather_client.requests.get")
    def test_undecodable_body(self, mock_get, mock_response):
        mock_get.return_value = mock_response(200, json_error=ValueError("not json"))
        with pytest.raises(AdapterError):
            self.client.lookup_weather("Austin")


class TestTranslateClient:
    def setup_method(self):
        self.client = TranslateClient(timeout=2)

    @patch("google_integrations.translate_client.requests.get")
    def test_translate(self, mock_get, mock_response):
        mock_get.return_value = mock_response(200, [[["hola amigos", "hello friends", None, None, 10]], None, "en"])

        assert self.client.translate("en", "es", "hello friends") == "hola amigos"
        _, kwargs = mock_get.call_args
        assert kwargs["params"] == {"client": "gtx", "sl": "en", "tl": "es", "dt": "t", "q": "hello friends"}

    @patch("google_integrations.translate_client.requests.get")
    def test_error_status_is_text(self, mock_get, mock_response):
        mock_get.return_value = mock_response(429)
        assert self.client.translate("en", "es", "hi") == "Translation error: API returned code: 429"

    @pytest.mark.parametrize("body", [[], [[]], [[[]]], [[[42]]], {"a": 1}, "text"])
    @patch("google_integrations.translate_client.requests.get")
    def test_unexpected_shape(self, mock_get, body, mock_response):
        mock_get.return_value = mock_response(200, body)
        with pytest.raises(AdapterError):
            self.client.translate("en", "es", "hi")


class TestFinnhubClient:
    def setup_method(self):
        self.client = FinnhubClient("finnhub_key", timeout=5)

    @patch("finnhub_integrations.finnhub_client.requests.get")
    def test_ticker_with_profile(self, mock_get, mock_response):
        mock_get.side_effect = [
            mock_response(200, {"c": 189.5, "d": 1.2, "dp": 0.6, "h": 190, "l": 187, "o": 188, "pc": 188.3}),
            mock_response(200, {"name": "Apple Inc"}),
        ]

        assert self.client.lookup_stock(" aapl ") == "AAPL(Apple Inc): $189.50"
        quote_call = mock_get.call_args_list[0]
        assert quote_call.args[0] == "https://finnhub.io/api/v1/quote"
        assert quote_call.kwargs["params"] == {"symbol": "AAPL", "token": "finnhub_key"}

    @patch("finnhub_integrations.finnhub_client.requests.get")
    def test_company_name_search(self, mock_get, mock_response):
        mock_get.side_effect = [
            mock_response(200, {"count": 1, "result": [
                {"description": "MICROSOFT CORP", "symbol": "MSFT", "type": "Common Stock"}]}),
            mock_response(200, {"c": 420.123}),
        ]

        assert self.client.lookup_stock("microsoft corp") == "MSFT(MICROSOFT CORP): $420.12"
        assert mock_get.call_count == 2

    @patch("finnhub_integrations.finnhub_client.requests.get")
    def test_no_search_results(self, mock_get, mock_response):
        mock_get.return_value = mock_response(200, {"count": 0, "result": []})
        assert self.client.lookup_stock("no such company") == "Stock error: no results found for 'no such company'"

    @patch("finnhub_integrations.finnhub_client.requests.get")
    def test_zero_quote(self, mock_get, mock_response):
        mock_get.return_value = mock_response(200, {"c": 0, "d": None, "dp": None})
        assert self.client.lookup_stock("ZZZZ") == "Stock error: no quote found for 'ZZZZ'"

    @patch("finnhub_integrations.finnhub_client.requests.get")
    def test_profile_failure_falls_back_to_symbol(self, mock_get, mock_response):
        mock_get.side_effect = [
            mock_response(200, {"c": 10}),
            requests.exceptions.Timeout("slow"),
        ]
        assert self.client.lookup_stock("IBM") == "IBM(IBM): $10.00"

    @patch("finnhub_integrations.finnhub_client.requests.get")
    def test_error_status(self, mock_get, mock_response):
        mock_get.return_value = mock_response(401)
        assert self.client.lookup_stock("IBM") == "Stock error: API returned code 401"

    @patch("finnhub_integrations.finnhub_client.requests.get")
    def test_transport_failure(self, mock_get):
        mock_get.side_effect = requests.exceptions.ConnectionError("down")
        with pytest.raises(AdapterError):
            self.client.lookup_stock("IBM")
