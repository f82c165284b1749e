# finnhub_client.py - Finnhub stock quote lookup

import logging
from typing import List, Optional

import requests
from pydantic import BaseModel, ValidationError

from gravybot.domain.errors import AdapterError

logger = logging.getLogger(__name__)


class FinnhubQuote(BaseModel):
    c: Optional[float] = 0.0   # current price
    d: Optional[float] = None   # change
    dp: Optional[float] = None  # percent change
    h: float = 0.0   # high of the day
    l: float = 0.0   # low of the day
    o: float = 0.0   # open of the day
    pc: float = 0.0  # previous close


class FinnhubSearchResult(BaseModel):
    description: str = ""
    symbol: str
    type: str = ""


class FinnhubSearch(BaseModel):
    count: int = 0
    result: List[FinnhubSearchResult] = []


class FinnhubProfile(BaseModel):
    name: str = ""


class FinnhubClient:
    name = "finnhub"

    def __init__(self, api_key: str, timeout: float = 10.0,
                 base_url: str = "https://finnhub.io/api/v1"):
        self.api_key = api_key
        self.timeout = timeout
        self.base_url = base_url

        if api_key:
            logger.info("✅ Finnhub integration enabled")
        else:
            logger.info("📝 Finnhub integration has no API key - lookups will fail upstream")

    def lookup_stock(self, query: str) -> str:
        """Return ``SYMBOL(Company): $price`` for a ticker or company name.

        Queries that don't look like a ticker (longer than five characters
        or containing a space) are resolved through symbol search first.
        """
        query = query.strip()
        symbol = query.upper()
        company_name = ""

        if len(query) > 5 or " " in query:
            response = self._get("/search", {"q": query})
            if response.status_code != 200:
                return f"Stock error: API returned code {response.status_code}"
            search = self._parse(response, FinnhubSearch)
            if search.count == 0 or not search.result:
                return f"Stock error: no results found for '{query}'"
            symbol = search.result[0].symbol
            company_name = search.result[0].description

        response = self._get("/quote", {"symbol": symbol})
        if response.status_code != 200:
            return f"Stock error: API returned code {response.status_code}"
        quote = self._parse(response, FinnhubQuote)
        if not quote.c:
            return f"Stock error: no quote found for '{symbol}'"

        if not company_name:
            company_name = self._company_name(symbol)

        return f"{symbol}({company_name or symbol}): ${quote.c:.2f}"

    def _company_name(self, symbol: str) -> str:
        """Best effort profile lookup; any failure just means no name."""
        try:
            response = self._get("/stock/profile2", {"symbol": symbol})
            if response.status_code != 200:
                return ""
            return self._parse(response, FinnhubProfile).name
        except AdapterError as e:
            logger.info(f"Finnhub profile lookup skipped for {symbol}: {e}")
            return ""

    def _get(self, path: str, params: dict) -> requests.Response:
        try:
            return requests.get(
                f"{self.base_url}{path}",
                params={**params, "token": self.api_key},
                timeout=self.timeout,
            )
        except requests.exceptions.RequestException as e:
            logger.error(f"stock request {path} failed: {e}")
            raise AdapterError(self.name, f"request failed: {e}") from e

    def _parse(self, response: requests.Response, model):
        try:
            return model.model_validate(response.json())
        except (ValueError, ValidationError) as e:
            logger.error(f"stock response parse failed: {e}")
            raise AdapterError(self.name, "malformed response") from e
