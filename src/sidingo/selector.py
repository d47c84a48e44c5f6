import asyncio
import logging
import random
from typing import Callable, Hashable, Optional, Sequence

from .content import ContentGenerator
from .models import ExerciseType, Phase, SessionState, ShadowingContent, VocabularyEntry
from .sampler import build_options

logger = logging.getLogger(__name__)


def choose_exercise(rng: random.Random = random, probability: float = 0.3) -> ExerciseType:
    if rng.random() < probability:
        return ExerciseType.SHADOWING
    return ExerciseType.QUIZ


def prepare_item(
    state: SessionState,
    catalog: Sequence[VocabularyEntry],
    rng: random.Random = random,
    probability: float = 0.3,
    distractor_count: int = 3,
) -> SessionState:
    """Picks the modality for the current position and builds what it needs.

    Quiz items get a fresh option set. Shadowing items start with no content;
    it arrives later through ``ContentResolved``.
    """
    entry = state.current_entry
    if state.phase != Phase.PLAYING or entry is None:
        return state

    exercise_type = choose_exercise(rng, probability)
    if exercise_type == ExerciseType.QUIZ:
        options = build_options(catalog, entry, distractor_count, rng)
    else:
        options = ()
    return state.model_copy(
        update={"exercise_type": exercise_type, "options": options, "content": None}
    )


class ShadowingFetch:
    """Background content request tied to one lesson item.

    ``key`` identifies the item the request was made for; the receiver of
    ``on_result`` decides whether that item is still the live one.
    """

    def __init__(
        self,
        key: Hashable,
        word: str,
        generator: ContentGenerator,
        on_result: Callable[[Hashable, ShadowingContent], None],
    ):
        self.key = key
        self.word = word
        self._generator = generator
        self._on_result = on_result
        self._task: Optional[asyncio.Task] = asyncio.get_running_loop().create_task(
            self._run()
        )

    async def _run(self):
        content = await self._generator.generate_practice_content(self.word)
        self._on_result(self.key, content)

    @property
    def done(self) -> bool:
        return self._task is None or self._task.done()

    async def wait(self):
        if self._task is not None:
            await asyncio.wait({self._task})

    def cancel(self):
        if self._task is not None and not self._task.done():
            logger.debug(f"Cancelling content request for {self.key}")
            self._task.cancel()
