import asyncio
import random
from typing import List, Optional

import pytest

from sidingo.content import fallback_content
from sidingo.models import ShadowingContent, VocabularyEntry
from sidingo.session import LessonRules
from sidingo.vocabulary import DEFAULT_CATALOG


class FakeGenerator:
    """Stands in for ContentGenerator; optionally holds replies until released."""

    def __init__(self, content: Optional[ShadowingContent] = None, gated: bool = False):
        self.content = content
        self.calls: List[str] = []
        self._gate: Optional[asyncio.Event] = asyncio.Event() if gated else None

    def release(self):
        self._gate.set()

    async def generate_practice_content(self, word: str) -> ShadowingContent:
        self.calls.append(word)
        if self._gate is not None:
            await self._gate.wait()
        return self.content or fallback_content(word)


@pytest.fixture
def catalog() -> List[VocabularyEntry]:
    return list(DEFAULT_CATALOG)


@pytest.fixture
def rng() -> random.Random:
    return random.Random(1234)


@pytest.fixture
def quiz_rules() -> LessonRules:
    """Rules where every item is multiple choice and failure fires almost at once."""
    return LessonRules(shadowing_probability=0.0, failure_grace_seconds=0.01)


@pytest.fixture
def shadowing_rules() -> LessonRules:
    return LessonRules(shadowing_probability=1.0, failure_grace_seconds=0.01)
