"""Lesson session state machine.

The rules live in ``reduce``, a pure function from a ``SessionState`` and an
event to the next state plus the effects the outside world should carry out.
``LessonSession`` wraps it with the effectful parts: random sampling, the
delayed failure transition and the background content requests.
"""

import asyncio
import logging
import random
import uuid
from datetime import datetime
from typing import Callable, Dict, Hashable, List, NamedTuple, Optional, Sequence, Tuple, Type

from pydantic import BaseModel, ConfigDict

from .config import settings
from .content import ContentGenerator
from .models import (
    AnswerAttempt,
    Effect,
    EventResult,
    ExerciseType,
    Phase,
    SessionSnapshot,
    SessionState,
    ShadowingContent,
    VocabularyEntry,
)
from .sampler import build_queue
from .selector import ShadowingFetch, prepare_item

logger = logging.getLogger(__name__)


class LessonRules(BaseModel):
    model_config = ConfigDict(frozen=True)

    lesson_size: int = 10
    distractor_count: int = 3
    shadowing_probability: float = 0.3
    max_hearts: int = 5
    xp_per_quiz: int = 10
    xp_per_shadowing: int = 20
    xp_bonus_complete: int = 50
    failure_grace_seconds: float = 1.0

    @classmethod
    def from_settings(cls) -> "LessonRules":
        return cls(
            lesson_size=settings.LESSON_SIZE,
            distractor_count=settings.DISTRACTOR_COUNT,
            shadowing_probability=settings.SHADOWING_PROBABILITY,
            max_hearts=settings.MAX_HEARTS,
            xp_per_quiz=settings.XP_PER_QUIZ,
            xp_per_shadowing=settings.XP_PER_SHADOWING,
            xp_bonus_complete=settings.XP_BONUS_COMPLETE,
            failure_grace_seconds=settings.FAILURE_GRACE_SECONDS,
        )


# --- Events ---
class Event(BaseModel):
    model_config = ConfigDict(frozen=True)


class SelectOption(Event):
    option_id: int


class CompleteShadowing(Event):
    pass


class Check(Event):
    pass


class Advance(Event):
    pass


class ContentResolved(Event):
    position: int
    content: ShadowingContent


class FailureElapsed(Event):
    pass


class Transition(NamedTuple):
    state: SessionState
    effects: Tuple[Effect, ...] = ()


# --- Reducer ---
def initial_state(queue: Sequence[VocabularyEntry], max_hearts: int = 5) -> SessionState:
    return SessionState(queue=tuple(queue), hearts=max_hearts, max_hearts=max_hearts)


def _select_option(state: SessionState, event: SelectOption, rules: LessonRules) -> Transition:
    if state.exercise_type != ExerciseType.QUIZ or state.attempt.checked:
        return Transition(state)
    if event.option_id not in {option.id for option in state.options}:
        return Transition(state)
    attempt = state.attempt.model_copy(update={"selected_option_id": event.option_id})
    return Transition(state.model_copy(update={"attempt": attempt}))


def _complete_shadowing(state: SessionState, event: CompleteShadowing, rules: LessonRules) -> Transition:
    # The tap is only offered once the sentence is on screen.
    if (
        state.exercise_type != ExerciseType.SHADOWING
        or state.attempt.checked
        or state.content is None
    ):
        return Transition(state)
    attempt = state.attempt.model_copy(update={"shadowing_done": True})
    return Transition(state.model_copy(update={"attempt": attempt}))


def _check(state: SessionState, event: Check, rules: LessonRules) -> Transition:
    attempt = state.attempt
    entry = state.current_entry
    if attempt.checked or entry is None:
        return Transition(state)

    if state.exercise_type == ExerciseType.QUIZ:
        if attempt.selected_option_id is None:
            return Transition(state)
        correct = attempt.selected_option_id == entry.id
        checked = attempt.model_copy(update={"checked": True, "correct": correct})
        if correct:
            return Transition(
                state.model_copy(
                    update={"attempt": checked, "xp": state.xp + rules.xp_per_quiz}
                ),
                (Effect.SUCCESS_CHIME,),
            )
        hearts = max(0, state.hearts - 1)
        effects: Tuple[Effect, ...] = (Effect.HAPTIC_ALERT,)
        if hearts == 0:
            effects += (Effect.SCHEDULE_FAILURE,)
        return Transition(
            state.model_copy(
                update={
                    "attempt": checked,
                    "hearts": hearts,
                    "failure_pending": hearts == 0,
                }
            ),
            effects,
        )

    if state.exercise_type == ExerciseType.SHADOWING:
        if not attempt.shadowing_done:
            return Transition(state)
        checked = attempt.model_copy(update={"checked": True, "correct": True})
        return Transition(
            state.model_copy(
                update={"attempt": checked, "xp": state.xp + rules.xp_per_shadowing}
            ),
            (Effect.SUCCESS_CHIME,),
        )

    return Transition(state)


def _advance(state: SessionState, event: Advance, rules: LessonRules) -> Transition:
    if not state.attempt.checked or state.failure_pending:
        return Transition(state)

    if state.position >= len(state.queue) - 1:
        return Transition(
            state.model_copy(
                update={
                    "attempt": AnswerAttempt(),
                    "xp": state.xp + rules.xp_bonus_complete,
                    "phase": Phase.COMPLETED,
                }
            ),
            (Effect.LESSON_COMPLETED,),
        )

    return Transition(
        state.model_copy(
            update={
                "attempt": AnswerAttempt(),
                "position": state.position + 1,
                "exercise_type": None,
                "options": (),
                "content": None,
            }
        ),
        (Effect.ITEM_ENTERED,),
    )


def _content_resolved(state: SessionState, event: ContentResolved, rules: LessonRules) -> Transition:
    if (
        event.position != state.position
        or state.exercise_type != ExerciseType.SHADOWING
        or state.content is not None
    ):
        return Transition(state)
    return Transition(state.model_copy(update={"content": event.content}))


def _failure_elapsed(state: SessionState, event: FailureElapsed, rules: LessonRules) -> Transition:
    if not state.failure_pending:
        return Transition(state)
    return Transition(
        state.model_copy(update={"phase": Phase.FAILED, "failure_pending": False}),
        (Effect.LESSON_FAILED,),
    )


_HANDLERS: Dict[Type[Event], Callable[[SessionState, Event, LessonRules], Transition]] = {
    SelectOption: _select_option,
    CompleteShadowing: _complete_shadowing,
    Check: _check,
    Advance: _advance,
    ContentResolved: _content_resolved,
    FailureElapsed: _failure_elapsed,
}


def reduce(state: SessionState, event: Event, rules: Optional[LessonRules] = None) -> Transition:
    """Applies one event. Events that make no sense right now leave the state as is."""
    handler = _HANDLERS.get(type(event))
    if handler is None:
        raise TypeError(f"Unknown lesson event: {type(event).__name__}")
    if state.phase != Phase.PLAYING:
        return Transition(state)
    return handler(state, event, rules or LessonRules.from_settings())


def snapshot_of(state: SessionState) -> SessionSnapshot:
    queue_length = len(state.queue)
    if state.phase == Phase.COMPLETED:
        progress = 1.0
    else:
        progress = state.position / queue_length if queue_length else 0.0
    return SessionSnapshot(
        phase=state.phase,
        hearts=state.hearts,
        max_hearts=state.max_hearts,
        streak=state.streak,
        xp=state.xp,
        position=state.position,
        queue_length=queue_length,
        progress=progress,
        current_entry=state.current_entry,
        exercise_type=state.exercise_type,
        options=state.options,
        content=state.content,
        content_pending=state.exercise_type == ExerciseType.SHADOWING
        and state.content is None,
        selected_option_id=state.attempt.selected_option_id,
        shadowing_done=state.attempt.shadowing_done,
        checked=state.attempt.checked,
        correct=state.attempt.correct,
    )


# --- Effectful wrapper ---
class FailureTimer:
    """One-shot delayed callback on the running event loop, cancellable."""

    def __init__(self, delay: float, callback: Callable[[], None]):
        self.delay = delay
        self._callback = callback
        self._handle: Optional[asyncio.TimerHandle] = None

    @property
    def pending(self) -> bool:
        return self._handle is not None

    def start(self):
        self.cancel()
        self._handle = asyncio.get_running_loop().call_later(self.delay, self._fire)

    def cancel(self):
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    def _fire(self):
        self._handle = None
        self._callback()


class LessonSession:
    """A learner's lesson: state, randomness, timer and pending content request.

    Must be created and driven from inside a running event loop, since
    shadowing items start a background request and a lost last heart
    schedules the failure transition.
    """

    def __init__(
        self,
        catalog: Sequence[VocabularyEntry],
        generator: ContentGenerator,
        rng: Optional[random.Random] = None,
        rules: Optional[LessonRules] = None,
        session_id: Optional[str] = None,
    ):
        self.session_id = session_id or str(uuid.uuid4())
        self.catalog: List[VocabularyEntry] = list(catalog)
        self.generator = generator
        self.rng = rng or random.Random()
        self.rules = rules or LessonRules.from_settings()
        self.created_at = datetime.now()
        self.last_seen = self.created_at

        self._generation = 0
        self._timer = FailureTimer(self.rules.failure_grace_seconds, self._on_failure_elapsed)
        self._fetch: Optional[ShadowingFetch] = None
        self.state = self._begin()

    # --- Input events ---
    def select_option(self, option_id: int) -> EventResult:
        return self.dispatch(SelectOption(option_id=option_id))

    def complete_shadowing(self) -> EventResult:
        return self.dispatch(CompleteShadowing())

    def check(self) -> EventResult:
        return self.dispatch(Check())

    def advance(self) -> EventResult:
        return self.dispatch(Advance())

    def reset(self) -> EventResult:
        self.close()
        self._generation += 1
        self.state = self._begin()
        logger.info(f"Session {self.session_id} restarted")
        return EventResult(snapshot=self.snapshot(), effects=[Effect.ITEM_ENTERED])

    def snapshot(self) -> SessionSnapshot:
        return snapshot_of(self.state)

    def close(self):
        """Stops the failure timer and any outstanding content request."""
        self._timer.cancel()
        if self._fetch is not None:
            self._fetch.cancel()
            self._fetch = None

    async def wait_for_content(self):
        if self._fetch is not None:
            await self._fetch.wait()

    def dispatch(self, event: Event) -> EventResult:
        self.last_seen = datetime.now()
        transition = reduce(self.state, event, self.rules)
        self.state = transition.state

        for effect in transition.effects:
            if effect == Effect.SCHEDULE_FAILURE:
                self._timer.start()
            elif effect == Effect.ITEM_ENTERED:
                self._enter_item()
            elif effect == Effect.LESSON_COMPLETED:
                self.close()
                logger.info(f"Session {self.session_id} completed with {self.state.xp} XP")
            elif effect == Effect.LESSON_FAILED:
                logger.info(
                    f"Session {self.session_id} failed at item "
                    f"{self.state.position + 1}/{len(self.state.queue)}"
                )
        return EventResult(snapshot=self.snapshot(), effects=list(transition.effects))

    # --- Internals ---
    def _begin(self) -> SessionState:
        queue = build_queue(self.catalog, self.rules.lesson_size, self.rng)
        self.state = initial_state(queue, self.rules.max_hearts)
        self._enter_item()
        return self.state

    def _enter_item(self):
        if self._fetch is not None:
            self._fetch.cancel()
            self._fetch = None

        self.state = prepare_item(
            self.state,
            self.catalog,
            self.rng,
            self.rules.shadowing_probability,
            self.rules.distractor_count,
        )
        entry = self.state.current_entry
        if self.state.exercise_type == ExerciseType.SHADOWING and entry is not None:
            self._fetch = ShadowingFetch(
                key=(self._generation, self.state.position),
                word=entry.target,
                generator=self.generator,
                on_result=self._on_content,
            )

    def _on_content(self, key: Hashable, content: ShadowingContent):
        generation, position = key
        if generation != self._generation:
            logger.debug(f"Discarding content for a previous lesson of {self.session_id}")
            return
        self.dispatch(ContentResolved(position=position, content=content))

    def _on_failure_elapsed(self):
        self.dispatch(FailureElapsed())
