"""
Unit tests for sidingo.content: the Gemini-backed practice sentence client.

The HTTP side is replaced with httpx.MockTransport; nothing leaves the process.
"""

import asyncio
import json

import httpx
import pytest

from sidingo.content import (
    ContentGenerationError,
    ContentGenerator,
    fallback_content,
    parse_generated_text,
)
from sidingo.models import ShadowingContent


def gemini_reply(text: str) -> dict:
    return {"candidates": [{"content": {"parts": [{"text": text}]}}]}


def make_generator(handler, api_key="test-key") -> ContentGenerator:
    return ContentGenerator(
        api_key=api_key,
        api_url="https://example.test/v1beta",
        model="test-model",
        timeout=1.0,
        transport=httpx.MockTransport(handler),
    )


class TestGeneratePracticeContent:
    """Tests for ContentGenerator.generate_practice_content()."""

    def test_generate_when_valid_json_then_returns_sentence_and_tip(self):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["url"] = str(request.url)
            seen["key"] = request.headers.get("x-goog-api-key")
            seen["body"] = json.loads(request.content)
            body = json.dumps({"sentence": "I drink water every day.", "tip": "Link the words"})
            return httpx.Response(200, json=gemini_reply(body))

        result = asyncio.run(make_generator(handler).generate_practice_content("Water"))

        assert result == ShadowingContent(sentence="I drink water every day.", tip="Link the words")
        assert seen["url"] == "https://example.test/v1beta/models/test-model:generateContent"
        assert seen["key"] == "test-key"
        assert '"Water"' in seen["body"]["contents"][0]["parts"][0]["text"]
        assert seen["body"]["generationConfig"]["responseMimeType"] == "application/json"

    def test_generate_when_fields_missing_then_fills_defaults(self):
        def handler(request):
            return httpx.Response(200, json=gemini_reply("{}"))

        result = asyncio.run(make_generator(handler).generate_practice_content("Coffee"))

        assert result.sentence == "I use the word Coffee every day."
        assert result.tip == "Speak clearly."

    def test_generate_when_http_error_then_fallback(self):
        def handler(request):
            return httpx.Response(500, json={"error": "boom"})

        result = asyncio.run(make_generator(handler).generate_practice_content("Car"))

        assert result == fallback_content("Car")

    def test_generate_when_text_not_json_then_fallback(self):
        def handler(request):
            return httpx.Response(200, json=gemini_reply("Sure! Here is a sentence"))

        result = asyncio.run(make_generator(handler).generate_practice_content("Train"))

        assert result == fallback_content("Train")

    def test_generate_when_no_candidates_then_fallback(self):
        def handler(request):
            return httpx.Response(200, json={"promptFeedback": {"blockReason": "OTHER"}})

        result = asyncio.run(make_generator(handler).generate_practice_content("Money"))

        assert result == fallback_content("Money")

    def test_generate_when_timeout_then_fallback(self):
        def handler(request):
            raise httpx.ReadTimeout("too slow", request=request)

        result = asyncio.run(make_generator(handler).generate_practice_content("Airport"))

        assert result == fallback_content("Airport")

    def test_generate_when_no_api_key_then_fallback_without_request(self):
        calls = []

        def handler(request):
            calls.append(request)
            return httpx.Response(200, json=gemini_reply("{}"))

        result = asyncio.run(make_generator(handler, api_key="").generate_practice_content("Yes"))

        assert result == fallback_content("Yes")
        assert calls == []


class TestParseGeneratedText:
    """Tests for parse_generated_text()."""

    def test_parse_when_json_array_then_raises(self):
        with pytest.raises(ContentGenerationError):
            parse_generated_text("No", "[1, 2]")

    def test_parse_when_empty_text_then_defaults(self):
        result = parse_generated_text("No", "")
        assert result.sentence == "I use the word No every day."

    def test_fallback_embeds_word(self):
        assert fallback_content("Happy") == ShadowingContent(
            sentence="Can you say Happy?", tip="Listen closely."
        )
