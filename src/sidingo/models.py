from enum import Enum
from typing import List, Optional, Tuple

from pydantic import BaseModel, ConfigDict


class Category(str, Enum):
    BASICS = "Basics"
    FOOD = "Food"
    TRAVEL = "Travel"
    BUSINESS = "Business"
    SOCIAL = "Social"


class ExerciseType(str, Enum):
    QUIZ = "QUIZ"
    SHADOWING = "SHADOWING"


class Phase(str, Enum):
    PLAYING = "PLAYING"
    COMPLETED = "COMPLETED"
    FAILED = "FAILED"


class VocabularyEntry(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: int
    target: str
    native: str
    category: Category
    image: Optional[str] = None


class QuizOption(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: int
    text: str


class ShadowingContent(BaseModel):
    model_config = ConfigDict(frozen=True)

    sentence: str
    tip: str


class AnswerAttempt(BaseModel):
    """Per-item answer progress, cleared whenever the lesson moves on."""

    model_config = ConfigDict(frozen=True)

    selected_option_id: Optional[int] = None
    checked: bool = False
    correct: Optional[bool] = None
    shadowing_done: bool = False


class SessionState(BaseModel):
    """Complete state of one lesson. Never mutated; see ``session.reduce``."""

    model_config = ConfigDict(frozen=True)

    queue: Tuple[VocabularyEntry, ...]
    position: int = 0
    hearts: int
    max_hearts: int
    streak: int = 1
    xp: int = 0
    phase: Phase = Phase.PLAYING
    # None until the selector has prepared the current item
    exercise_type: Optional[ExerciseType] = None
    options: Tuple[QuizOption, ...] = ()
    content: Optional[ShadowingContent] = None
    attempt: AnswerAttempt = AnswerAttempt()
    failure_pending: bool = False

    @property
    def current_entry(self) -> Optional[VocabularyEntry]:
        if 0 <= self.position < len(self.queue):
            return self.queue[self.position]
        return None


class SessionSnapshot(BaseModel):
    phase: Phase
    hearts: int
    max_hearts: int
    streak: int
    xp: int
    position: int
    queue_length: int
    progress: float
    current_entry: Optional[VocabularyEntry]
    exercise_type: Optional[ExerciseType]
    options: Tuple[QuizOption, ...] = ()
    content: Optional[ShadowingContent] = None
    content_pending: bool = False
    selected_option_id: Optional[int] = None
    shadowing_done: bool = False
    checked: bool
    correct: Optional[bool]


class CategorySummary(BaseModel):
    id: Category
    name: str
    count: int


class Effect(str, Enum):
    """Side effects the presentation layer should perform after an event."""

    SUCCESS_CHIME = "SUCCESS_CHIME"
    HAPTIC_ALERT = "HAPTIC_ALERT"
    SCHEDULE_FAILURE = "SCHEDULE_FAILURE"
    ITEM_ENTERED = "ITEM_ENTERED"
    LESSON_COMPLETED = "LESSON_COMPLETED"
    LESSON_FAILED = "LESSON_FAILED"


class EventResult(BaseModel):
    snapshot: SessionSnapshot
    effects: List[Effect] = []
