import logging
from typing import Optional

import requests
from pydantic import BaseModel, ValidationError

from gravybot.domain.errors import AdapterError

logger = logging.getLogger(__name__)


class YirpResponse(BaseModel):
    short_url: str
    long_url: str = ""
    created_at: str = ""


class YirpClient:
    """Client for the Yirp URL shortening API."""

    name = "yirp"

    def __init__(self, api_address: str, api_key: str, timeout: float = 10.0,
                 domain: Optional[str] = None):
        self.api_address = api_address
        self.api_key = api_key
        self.timeout = timeout
        self.domain = domain

        logger.info(f"🔧 YirpClient initialized:")
        logger.info(f"   API Address: {api_address}")
        logger.info(f"   API Key: {'***' + (api_key[-4:] if api_key and len(api_key) > 4 else 'NOT_SET')}")

    def shorten(self, url: str) -> str:
        """Shorten ``url`` and return the short URL.

        Raises AdapterError for transport errors, any status other than
        200/201, or a body that is not a Yirp response.
        """
        logger.info(f"🔗 Shortening URL: {url}")
        payload = {"api_key": self.api_key, "long_url": url}
        if self.domain:
            payload["domain"] = self.domain

        try:
            response = requests.post(self.api_address, json=payload, timeout=self.timeout)
        except requests.exceptions.Timeout as e:
            logger.error(f"❌ Yirp request timeout: {str(e)}")
            raise AdapterError(self.name, f"request timed out after {self.timeout}s") from e
        except requests.exceptions.RequestException as e:
            logger.error(f"❌ Yirp request failed: {str(e)}")
            raise AdapterError(self.name, f"request failed: {e}") from e

        logger.info(f"📨 Yirp status code: {response.status_code}")
        if response.status_code not in (200, 201):
            logger.error(f"❌ Yirp error response: {response.status_code} {response.text[:200]}")
            raise AdapterError(self.name, f"URL API returned code: {response.status_code}")

        try:
            parsed = YirpResponse.model_validate(response.json())
        except (ValueError, ValidationError) as e:
            logger.error(f"❌ Could not parse Yirp response: {e}")
            raise AdapterError(self.name, "malformed response") from e

        logger.info(f"✅ Shortened {url} -> {parsed.short_url}")
        return parsed.short_url
