"""Google Translate client using the public ``translate_a/single`` endpoint.

The endpoint answers with nested arrays rather than an object::

    [[["translated text", "original text", ...], ...], ...]

Only the first translated segment is returned.
"""
import logging
from typing import Any

import requests

from gravybot.domain.errors import AdapterError

logger = logging.getLogger(__name__)


class TranslateClient:
    name = "translate"

    def __init__(self, timeout: float = 10.0,
                 base_url: str = "https://translate.googleapis.com/translate_a/single"):
        self.timeout = timeout
        self.base_url = base_url

    def translate(self, source_lang: str, target_lang: str, text: str) -> str:
        params = {
            "client": "gtx",
            "sl": source_lang,
            "tl": target_lang,
            "dt": "t",
            "q": text,
        }
        try:
            response = requests.get(self.base_url, params=params, timeout=self.timeout)
        except requests.exceptions.RequestException as e:
            logger.error(f"translation request failed: {e}")
            raise AdapterError(self.name, f"request failed: {e}") from e

        if response.status_code > 299:
            result = f"Translation error: API returned code: {response.status_code}"
            logger.error(result)
            return result

        try:
            body = response.json()
        except ValueError as e:
            logger.error(f"Translation response parse failed: {e}")
            raise AdapterError(self.name, "malformed response") from e

        translated = _first_segment(body)
        if translated is None:
            raise AdapterError(self.name, "unable to parse translation response")
        return translated


def _first_segment(body: Any):
    node = body
    for _ in range(3):
        if not isinstance(node, list) or not node:
            return None
        node = node[0]
    return node if isinstance(node, str) else None
