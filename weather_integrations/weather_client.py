# weather_client.py - weatherapi.com current conditions lookup

import logging

import requests
from pydantic import BaseModel, ValidationError

from gravybot.domain.errors import AdapterError

logger = logging.getLogger(__name__)

US_COUNTRY_PREFIXES = ("United States of America", "USA")


class WeatherLocation(BaseModel):
    name: str = ""
    region: str = ""
    country: str = ""
    lat: float = 0.0
    lon: float = 0.0


class WeatherCondition(BaseModel):
    text: str = ""


class WeatherCurrent(BaseModel):
    last_updated: str = ""
    temp_c: float = 0.0
    temp_f: float = 0.0
    condition: WeatherCondition = WeatherCondition()
    wind_mph: float = 0.0
    wind_kph: float = 0.0
    wind_dir: str = ""
    humidity: float = 0.0


class WeatherAPIResponse(BaseModel):
    location: WeatherLocation
    current: WeatherCurrent


class WeatherClient:
    name = "weather"

    def __init__(self, api_key: str, timeout: float = 10.0,
                 base_url: str = "https://api.weatherapi.com/v1"):
        self.api_key = api_key
        self.timeout = timeout
        self.base_url = base_url

        if api_key:
            logger.info("✅ Weather integration enabled")
        else:
            logger.info("📝 Weather integration has no API key - lookups will fail upstream")

    def lookup_weather(self, query: str) -> str:
        """Return a one-line current conditions report for ``query``.

        Unknown locations and other upstream status errors come back as a
        "Weather error: ..." text; transport and payload failures raise
        AdapterError.
        """
        try:
            response = requests.get(
                f"{self.base_url}/current.json",
                params={"key": self.api_key, "q": query, "aqi": "no"},
                timeout=self.timeout,
            )
        except requests.exceptions.RequestException as e:
            logger.error(f"weather request failed: {e}")
            raise AdapterError(self.name, f"request failed: {e}") from e

        if response.status_code == 400:
            result = f"Weather error: {query} not found. Try using a city state or city country pair."
            logger.info(result)
            return result

        if response.status_code > 299:
            result = f"Weather error: API returned code: {response.status_code}"
            logger.error(result)
            return result

        try:
            weather = WeatherAPIResponse.model_validate(response.json())
        except (ValueError, ValidationError) as e:
            logger.error(f"Weather response parse failed: {e}")
            raise AdapterError(self.name, "malformed response") from e

        return self.format_report(weather)

    @staticmethod
    def format_report(weather: WeatherAPIResponse) -> str:
        """Imperial units for US locations, metric everywhere else.

        ``%%`` is the MUSH escape for a literal percent sign.
        """
        location = weather.location
        current = weather.current
        if location.country.startswith(US_COUNTRY_PREFIXES):
            return (f"{location.name}, {location.region}: {current.condition.text} "
                    f"{current.temp_f:.1f}F {current.humidity:.1f}%% "
                    f"{current.wind_mph:.1f}mph {current.wind_dir}")
        return (f"{location.name}, {location.country}: {current.condition.text} "
                f"{current.temp_c:.1f}C {current.humidity:.1f}%% "
                f"{current.wind_kph:.1f}kph {current.wind_dir}")
