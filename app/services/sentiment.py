"""Journal sentiment scoring through Google Cloud Natural Language.

Only the document-level score in [-1, 1] is used; it feeds
``wellness.risk.risk_from_sentiment``.
"""

from __future__ import annotations

import logging

import httpx

from ..core.config import Settings
from ..errors import UpstreamError

logger = logging.getLogger(__name__)


class SentimentClient:
    def __init__(self, settings: Settings, transport: httpx.AsyncBaseTransport | None = None):
        self.api_key = settings.LANGUAGE_API_KEY
        self.base_url = settings.LANGUAGE_BASE_URL.rstrip("/")
        self.timeout = settings.LANGUAGE_TIMEOUT_SECONDS
        self.transport = transport

    @property
    def enabled(self) -> bool:
        return bool(self.api_key)

    async def analyze(self, text: str) -> float:
        if not self.enabled:
            raise UpstreamError("Sentiment analysis is not configured")
        url = f"{self.base_url}/documents:analyzeSentiment"
        payload = {
            "document": {"type": "PLAIN_TEXT", "content": text},
            "encodingType": "UTF8",
        }
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                r = await client.post(url, params={"key": self.api_key}, json=payload)
                r.raise_for_status()
                data = r.json()
        except (httpx.HTTPError, ValueError) as e:
            logger.warning("Sentiment request failed: %s", e)
            raise UpstreamError("Sentiment service request failed.") from e

        if not isinstance(data, dict):
            raise UpstreamError("Sentiment service returned a malformed score.")
        document = data.get("documentSentiment") or {}
        if not isinstance(document, dict):
            raise UpstreamError("Sentiment service returned a malformed score.")
        # an empty document comes back without a score; treat it as neutral
        score = document.get("score", 0.0)
        try:
            return float(score)
        except (TypeError, ValueError) as e:
            raise UpstreamError("Sentiment service returned a malformed score.") from e
