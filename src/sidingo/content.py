"""Practice sentences for shadowing exercises, generated by Gemini."""

import json
import logging
from typing import Optional

import httpx

from .config import settings
from .models import ShadowingContent

logger = logging.getLogger(__name__)

PROMPT_TEMPLATE = """
You are an expert English Language Coach specializing in the Shadowing Technique.

Task: Create a simple, natural English sentence using the word "{word}".
The sentence should be useful for a beginner (A1/A2).
Also provide a 2-3 word pronunciation tip (e.g., "Link the words").

Output format strictly JSON:
{{
  "sentence": "The sentence here.",
  "tip": "Short tip."
}}
"""


class ContentGenerationError(Exception):
    pass


def fallback_content(word: str) -> ShadowingContent:
    return ShadowingContent(sentence=f"Can you say {word}?", tip="Listen closely.")


class ContentGenerator:
    """Client for the generateContent endpoint.

    ``generate_practice_content`` always returns something usable: any error on
    the way (missing key, HTTP failure, timeout, garbage response) is logged
    and replaced with ``fallback_content``.
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        api_url: Optional[str] = None,
        model: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.api_key = settings.GEMINI_API_KEY if api_key is None else api_key
        self.api_url = (api_url or settings.GEMINI_API_URL).rstrip("/")
        self.model = model or settings.GEMINI_MODEL
        self.timeout = settings.CONTENT_TIMEOUT_SECONDS if timeout is None else timeout
        self.transport = transport

    async def generate_practice_content(self, word: str) -> ShadowingContent:
        try:
            return await self._request(word)
        except Exception as e:
            logger.warning(f"Content generation failed for '{word}': {e}")
            return fallback_content(word)

    async def _request(self, word: str) -> ShadowingContent:
        if not self.api_key:
            raise ContentGenerationError("no API key configured")

        payload = {
            "contents": [{"parts": [{"text": PROMPT_TEMPLATE.format(word=word)}]}],
            "generationConfig": {"responseMimeType": "application/json"},
        }
        async with httpx.AsyncClient(
            timeout=self.timeout, transport=self.transport
        ) as client:
            resp = await client.post(
                f"{self.api_url}/models/{self.model}:generateContent",
                headers={"x-goog-api-key": self.api_key},
                json=payload,
            )

        if resp.status_code != 200:
            raise ContentGenerationError(f"API error: {resp.status_code}")

        return parse_generated_text(word, _extract_text(resp.json()))


def _extract_text(data) -> str:
    try:
        parts = data["candidates"][0]["content"]["parts"]
    except (KeyError, IndexError, TypeError):
        raise ContentGenerationError("response has no candidates")
    return "".join(part.get("text", "") for part in parts)


def parse_generated_text(word: str, text: str) -> ShadowingContent:
    """Reads the model's JSON answer, filling in whichever field is missing."""
    try:
        result = json.loads(text or "{}")
    except json.JSONDecodeError:
        raise ContentGenerationError(f"Failed to parse response: {text[:300]}")
    if not isinstance(result, dict):
        raise ContentGenerationError("response is not a JSON object")

    sentence = result.get("sentence") or f"I use the word {word} every day."
    tip = result.get("tip") or "Speak clearly."
    return ShadowingContent(sentence=str(sentence), tip=str(tip))
