import json
import logging

import httpx

from ..core.config import Settings
from ..errors import UpstreamError

logger = logging.getLogger(__name__)

class GeminiClient:
    """Thin async wrapper over the Gemini ``generateContent`` endpoint.

    ``contents`` uses Gemini's own shape: ``{"role": "user"|"model", "parts": [{"text": ...}]}``.
    Any transport error, API error or reply without candidate text raises
    ``UpstreamError``; nothing is retried.
    """

    def __init__(self, settings: Settings, transport: httpx.AsyncBaseTransport | None = None):
        self.api_key = settings.GEMINI_API_KEY
        self.model = settings.GEMINI_MODEL
        self.base_url = settings.GEMINI_BASE_URL.rstrip("/")
        self.timeout = settings.GEMINI_TIMEOUT_SECONDS
        self.transport = transport

    async def generate(self, system: str, contents: list[dict], temperature: float = 0.4, json_mode: bool = False) -> str:
        url = f"{self.base_url}/models/{self.model}:generateContent"
        headers = {"x-goog-api-key": self.api_key}
        generation_config = {"temperature": temperature}
        if json_mode:
            generation_config["responseMimeType"] = "application/json"
        payload = {
            "systemInstruction": {"parts": [{"text": system}]},
            "contents": contents,
            "generationConfig": generation_config,
        }
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                r = await client.post(url, headers=headers, json=payload)
        except httpx.HTTPError as e:
            logger.warning("Gemini request failed: %s", e)
            raise UpstreamError("AI API request failed.") from e
        try:
            data = r.json()
        except ValueError as e:
            logger.warning("Gemini returned non-JSON body (status %s)", r.status_code)
            raise UpstreamError("Failed to parse AI response.") from e
        if not isinstance(data, dict):
            logger.warning("Gemini returned a non-object body (status %s)", r.status_code)
            raise UpstreamError("Failed to parse AI response.")
        if r.status_code >= 400 or "error" in data:
            error = data.get("error")
            if isinstance(error, dict):
                message = error.get("message", r.reason_phrase)
            else:
                message = error or r.reason_phrase
            logger.warning("Gemini API error %s: %s", r.status_code, message)
            raise UpstreamError(f"AI API Error: {message}")
        try:
            text = data["candidates"][0]["content"]["parts"][0]["text"]
        except (KeyError, IndexError, TypeError) as e:
            logger.warning("Gemini reply had no candidate text: %s", data)
            raise UpstreamError("Failed to parse AI response.") from e
        if not isinstance(text, str):
            raise UpstreamError("Failed to parse AI response.")
        return text

    async def generate_json(self, system: str, contents: list[dict], temperature: float = 0.0) -> dict:
        raw = await self.generate(system, contents, temperature=temperature, json_mode=True)
        try:
            parsed = json.loads(raw)
        except ValueError as e:
            raise UpstreamError("Failed to parse AI response.") from e
        if not isinstance(parsed, dict):
            raise UpstreamError("Failed to parse AI response.")
        return parsed

def user_content(text: str) -> dict:
    return {"role": "user", "parts": [{"text": text}]}

def model_content(text: str) -> dict:
    return {"role": "model", "parts": [{"text": text}]}
