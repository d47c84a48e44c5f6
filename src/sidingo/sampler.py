"""Random lesson building: the queue of cards and the multiple-choice options."""

import random
from typing import Sequence, Tuple

from .models import QuizOption, VocabularyEntry


def build_queue(
    catalog: Sequence[VocabularyEntry], size: int, rng: random.Random = random
) -> Tuple[VocabularyEntry, ...]:
    """Uniformly permutes the catalog and keeps the first ``size`` entries.

    A catalog smaller than ``size`` gives a shorter queue rather than an error.
    """
    shuffled = list(catalog)
    rng.shuffle(shuffled)
    return tuple(shuffled[:size])


def build_options(
    catalog: Sequence[VocabularyEntry],
    correct: VocabularyEntry,
    distractor_count: int = 3,
    rng: random.Random = random,
) -> Tuple[QuizOption, ...]:
    """One correct option plus up to ``distractor_count`` distinct distractors, shuffled."""
    pool = [entry for entry in catalog if entry.id != correct.id]
    distractors = rng.sample(pool, min(distractor_count, len(pool)))

    options = [QuizOption(id=correct.id, text=correct.native)] + [
        QuizOption(id=entry.id, text=entry.native) for entry in distractors
    ]
    rng.shuffle(options)
    return tuple(options)
