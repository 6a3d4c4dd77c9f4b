"""In-memory quiz session engine.

A ``QuizSession`` walks one user through a fixed list of questions:

    answering --(last answer / skip)--> results <--(enter/exit review)--> reviewing
        ^                                  |
        +------------- reset --------------+

Selecting an answer records it immediately and returns a
``ScheduledTransition``: a short feedback pause (longer when the answer was
right) followed by the move to the next question or to results. When an event
loop is running the pause is a real ``loop.call_later`` timer; otherwise the
host fires the handle itself. Reset, skip, close and manual navigation cancel
the pending handle, and a handle that fires for a stale attempt does nothing.

Guarded operations (answering twice, reviewing before results, ...) are
no-ops and return a falsy value; they never raise.

``QuizSessionManager`` keeps live sessions keyed by a short id, forwards each
finished attempt to a ``ResultRecorder`` and sweeps idle sessions.
"""

from __future__ import annotations

import asyncio
from datetime import datetime, timezone
from functools import partial
from typing import Callable, Iterable, Optional
from uuid import uuid4

from studyaid.core.config import settings
from studyaid.core.logging import get_logger, log_context
from studyaid.modules.quiz.models import (
    OptionKey,
    QuizQuestion,
    QuizSessionState,
    ResultSummary,
    SessionPhase,
)
from studyaid.modules.quiz.parser import extract_quiz
from studyaid.modules.quiz.results import (
    InMemoryResultRecorder,
    ResultRecorder,
    percentage,
)

logger = get_logger(__name__)

CompletionCallback = Callable[[int, int], None]
StateListener = Callable[[QuizSessionState], None]


def _now_utc() -> datetime:
    return datetime.now(timezone.utc)


def _short_id() -> str:
    # 8-char slice from uuid4
    return uuid4().hex[:8]


def compute_score(
    questions: Iterable[QuizQuestion], answers: dict[int, OptionKey]
) -> int:
    """Count of indices whose recorded answer matches the correct key."""
    return sum(1 for i, q in enumerate(questions) if answers.get(i) == q.correct)


def summarize(score: int, total: int) -> ResultSummary:
    pct = percentage(score, total)
    if pct >= 90:
        message, description = (
            "Excellent!",
            "Outstanding performance! You've mastered this topic.",
        )
    elif pct >= 70:
        message, description = (
            "Great job!",
            "You have a good understanding of the material.",
        )
    elif pct >= 50:
        message, description = (
            "Good effort!",
            "Keep studying to improve your knowledge.",
        )
    else:
        message, description = (
            "Try again!",
            "Review the questions and try again to improve your score.",
        )
    return ResultSummary(
        score=score,
        total=total,
        percentage=pct,
        message=message,
        description=description,
    )


class NoQuestionsFound(ValueError):
    """Raised when quiz text yields no questions; carries the raw text."""

    def __init__(self, raw: str) -> None:
        super().__init__("no_questions")
        self.raw = raw


class ScheduledTransition:
    """Cancellable handle for the delayed move after an answer."""

    def __init__(
        self, session: "QuizSession", *, attempt: int, index: int, delay: float
    ) -> None:
        self.session = session
        self.attempt = attempt
        self.index = index
        self.delay = max(0.0, float(delay))
        self.cancelled = False
        self.fired = False
        self._timer: Optional[asyncio.TimerHandle] = None

    @property
    def done(self) -> bool:
        return self.cancelled or self.fired

    def schedule(self, loop: asyncio.AbstractEventLoop) -> None:
        if self.done or self._timer is not None:
            return
        self._timer = loop.call_later(self.delay, self.fire)

    def cancel(self) -> None:
        if self.done:
            return
        self.cancelled = True
        if self._timer is not None:
            self._timer.cancel()

    def fire(self) -> bool:
        """Apply the transition now. False if cancelled, already fired or stale."""
        if self.done:
            return False
        self.fired = True
        if self._timer is not None:
            self._timer.cancel()
        return self.session._apply_transition(self)


class QuizSession:
    """State machine for one quiz over a fixed question list."""

    def __init__(
        self,
        questions: Iterable[QuizQuestion],
        *,
        session_id: Optional[str] = None,
        on_complete: Optional[CompletionCallback] = None,
        on_badge: Optional[CompletionCallback] = None,
        on_change: Optional[StateListener] = None,
        correct_delay: Optional[float] = None,
        incorrect_delay: Optional[float] = None,
        badge_threshold: Optional[float] = None,
        loop: Optional[asyncio.AbstractEventLoop] = None,
    ) -> None:
        self.questions: tuple[QuizQuestion, ...] = tuple(questions)
        if not self.questions:
            raise ValueError("a quiz session needs at least one question")
        self.id = session_id
        self.on_complete = on_complete
        self.on_badge = on_badge
        self.on_change = on_change
        self.correct_delay = (
            settings.quiz.correct_delay if correct_delay is None else correct_delay
        )
        self.incorrect_delay = (
            settings.quiz.incorrect_delay if incorrect_delay is None else incorrect_delay
        )
        self.badge_threshold = (
            settings.quiz.badge_threshold if badge_threshold is None else badge_threshold
        )
        self._loop = loop

        self.phase = SessionPhase.ANSWERING
        self.current_index = 0
        self.answers: dict[int, OptionKey] = {}
        self.review_index = 0
        self.attempt = 1
        self.score: Optional[int] = None
        self.closed = False
        self.created_at = _now_utc()
        self.last_activity = self.created_at
        self._pending: Optional[ScheduledTransition] = None
        self._reported_attempt = 0

    # Introspection ------------------------------------------------------
    @property
    def total(self) -> int:
        return len(self.questions)

    @property
    def current_question(self) -> QuizQuestion:
        return self.questions[self.current_index]

    @property
    def pending(self) -> Optional[ScheduledTransition]:
        if self._pending is not None and self._pending.done:
            self._pending = None
        return self._pending

    def snapshot(self) -> QuizSessionState:
        return QuizSessionState(
            id=self.id,
            phase=self.phase,
            questions=list(self.questions),
            current_index=self.current_index,
            current_question=self.current_question,
            answers=dict(self.answers),
            review_index=self.review_index,
            attempt=self.attempt,
            total=self.total,
            score=self.score,
            summary=(
                summarize(self.score, self.total) if self.score is not None else None
            ),
            pending_transition=self.pending is not None,
        )

    # Answering ----------------------------------------------------------
    def select_answer(self, key: OptionKey | str) -> Optional[ScheduledTransition]:
        """Record an answer for the current question.

        Returns the scheduled follow-up transition, or None when the call is
        ignored (wrong phase, already answered, closed, unknown key).
        """
        if self.closed or self.phase != SessionPhase.ANSWERING:
            logger.debug("select_answer ignored in %s", self.phase.value, extra=self._log_extra())
            return None
        if self.current_index in self.answers:
            logger.debug("question %d already answered", self.current_index, extra=self._log_extra())
            return None
        raw = key.value if isinstance(key, OptionKey) else str(key)
        try:
            choice = OptionKey(raw.strip().upper())
        except ValueError:
            logger.debug("unknown option key %r", key, extra=self._log_extra())
            return None

        self.answers[self.current_index] = choice
        correct = self.current_question.is_correct(choice)
        transition = ScheduledTransition(
            self,
            attempt=self.attempt,
            index=self.current_index,
            delay=self.correct_delay if correct else self.incorrect_delay,
        )
        self._pending = transition
        loop = self._running_loop()
        if loop is not None:
            transition.schedule(loop)
        self._touch()
        self._publish()
        return transition

    def advance_now(self) -> bool:
        """Fire the pending transition without waiting for its delay."""
        pending = self.pending
        if pending is None:
            return False
        return pending.fire()

    def next_question(self) -> bool:
        if self.phase != SessionPhase.ANSWERING:
            return False
        self._cancel_pending()
        if self.current_index < self.total - 1:
            self.current_index += 1
            self._touch()
            self._publish()
            return True
        if self.answers:
            self._finish()
            return True
        return False

    def previous_question(self) -> bool:
        if self.phase != SessionPhase.ANSWERING or self.current_index == 0:
            return False
        self._cancel_pending()
        self.current_index -= 1
        self._touch()
        self._publish()
        return True

    def skip_to_results(self) -> bool:
        """Finish early; unanswered questions count as wrong."""
        if self.phase != SessionPhase.ANSWERING or not self.answers:
            return False
        self._cancel_pending()
        self._finish()
        return True

    # Results and review -------------------------------------------------
    def reset(self) -> bool:
        """Start a new attempt over the same questions."""
        if self.phase == SessionPhase.ANSWERING:
            return False
        self._cancel_pending()
        self.answers = {}
        self.current_index = 0
        self.review_index = 0
        self.score = None
        self.attempt += 1
        self.phase = SessionPhase.ANSWERING
        self._touch()
        self._publish()
        return True

    def enter_review(self) -> bool:
        if self.phase != SessionPhase.RESULTS:
            return False
        self.review_index = 0
        self.phase = SessionPhase.REVIEWING
        self._touch()
        self._publish()
        return True

    def exit_review(self) -> bool:
        if self.phase != SessionPhase.REVIEWING:
            return False
        self.phase = SessionPhase.RESULTS
        self._touch()
        self._publish()
        return True

    def next_review(self) -> bool:
        if self.phase != SessionPhase.REVIEWING or self.review_index >= self.total - 1:
            return False
        self.review_index += 1
        self._touch()
        self._publish()
        return True

    def previous_review(self) -> bool:
        if self.phase != SessionPhase.REVIEWING or self.review_index == 0:
            return False
        self.review_index -= 1
        self._touch()
        self._publish()
        return True

    def close(self) -> None:
        """Teardown: drop any pending transition."""
        self._cancel_pending()
        self.closed = True

    # Internals ----------------------------------------------------------
    def _apply_transition(self, transition: ScheduledTransition) -> bool:
        if self._pending is transition:
            self._pending = None
        if (
            self.closed
            or transition.attempt != self.attempt
            or transition.index != self.current_index
            or self.phase != SessionPhase.ANSWERING
        ):
            return False
        if self.current_index < self.total - 1:
            self.current_index += 1
            self._touch()
            self._publish()
        else:
            self._finish()
        return True

    def _finish(self) -> None:
        self.score = compute_score(self.questions, self.answers)
        self.phase = SessionPhase.RESULTS
        self._touch()
        if self._reported_attempt != self.attempt:
            self._reported_attempt = self.attempt
            self._report(self.score)
        self._publish()

    def _report(self, score: int) -> None:
        if self.on_complete is not None:
            try:
                self.on_complete(score, self.total)
            except Exception:  # noqa: BLE001
                logger.warning(
                    "completion callback failed", exc_info=True, extra=self._log_extra()
                )
        if self.on_badge is not None and score / self.total >= self.badge_threshold:
            try:
                self.on_badge(score, self.total)
            except Exception:  # noqa: BLE001
                logger.warning("badge hook failed", exc_info=True, extra=self._log_extra())

    def _cancel_pending(self) -> None:
        if self._pending is not None:
            self._pending.cancel()
            self._pending = None

    def _running_loop(self) -> Optional[asyncio.AbstractEventLoop]:
        if self._loop is not None:
            return self._loop
        try:
            return asyncio.get_running_loop()
        except RuntimeError:
            return None

    def _touch(self) -> None:
        self.last_activity = _now_utc()

    def _publish(self) -> None:
        if self.on_change is None:
            return
        try:
            self.on_change(self.snapshot())
        except Exception:  # noqa: BLE001
            logger.warning("state listener failed", exc_info=True, extra=self._log_extra())

    def _log_extra(self) -> dict:
        return log_context(self.id)


class QuizSessionManager:
    def __init__(self, *, recorder: Optional[ResultRecorder] = None) -> None:
        self.sessions: dict[str, QuizSession] = {}
        self.recorder: ResultRecorder = recorder or InMemoryResultRecorder()
        self._cleanup_task: Optional[asyncio.Task] = None
        self._record_tasks: set[asyncio.Task] = set()
        self._idle_seconds: int = settings.quiz.idle_seconds
        self._sweep_interval: int = settings.quiz.sweep_interval

    # Session lifecycle --------------------------------------------------
    def create_session(self, questions: Iterable[QuizQuestion]) -> QuizSession:
        session_id = _short_id()
        session = QuizSession(
            questions,
            session_id=session_id,
            on_complete=partial(self._on_complete, session_id),
            on_badge=partial(self._on_badge, session_id),
        )
        self.sessions[session_id] = session
        logger.info(
            "quiz session created with %d questions",
            session.total,
            extra=log_context(session_id),
        )
        return session

    def create_from_text(self, text: str) -> QuizSession:
        questions = extract_quiz(text)
        if not questions:
            raise NoQuestionsFound(text)
        return self.create_session(questions)

    def get_session(self, session_id: str) -> Optional[QuizSession]:
        return self.sessions.get(session_id)

    def discard(self, session_id: str) -> bool:
        session = self.sessions.pop(session_id, None)
        if session is None:
            return False
        session.close()
        return True

    # Completion ---------------------------------------------------------
    def _on_complete(self, session_id: str, score: int, total: int) -> None:
        logger.info(
            "quiz finished: %d/%d", score, total, extra=log_context(session_id)
        )
        job = self._record(session_id, score, total)
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            asyncio.run(job)
            return
        task = loop.create_task(job)
        self._record_tasks.add(task)
        task.add_done_callback(self._record_tasks.discard)

    async def _record(self, session_id: str, score: int, total: int) -> None:
        try:
            await self.recorder.record(percentage(score, total), total, score)
        except Exception as e:  # noqa: BLE001
            # Results stay visible locally even when recording fails
            logger.warning(
                "failed to record quiz result: %s", e, extra=log_context(session_id)
            )

    def _on_badge(self, session_id: str, score: int, total: int) -> None:
        logger.info(
            "badge earned: %d%%", percentage(score, total), extra=log_context(session_id)
        )

    async def drain(self) -> None:
        """Wait for in-flight result recordings."""
        if self._record_tasks:
            await asyncio.gather(*list(self._record_tasks), return_exceptions=True)

    # Cleanup loop -------------------------------------------------------
    def sweep(self, now: Optional[datetime] = None) -> list[str]:
        """Drop sessions idle longer than the configured window."""
        now = now or _now_utc()
        stale = [
            sid
            for sid, s in self.sessions.items()
            if (now - s.last_activity).total_seconds() > self._idle_seconds
        ]
        for sid in stale:
            self.discard(sid)
        if stale:
            logger.info("swept %d idle quiz sessions", len(stale))
        return stale

    def start(
        self, *, idle_seconds: Optional[int] = None, sweep_interval: Optional[int] = None
    ) -> None:
        if idle_seconds is not None:
            self._idle_seconds = max(60, int(idle_seconds))
        if sweep_interval is not None:
            self._sweep_interval = max(5, int(sweep_interval))
        if self._cleanup_task and not self._cleanup_task.done():
            return
        self._cleanup_task = asyncio.create_task(self._cleanup_loop())

    async def stop(self) -> None:
        if self._cleanup_task and not self._cleanup_task.done():
            self._cleanup_task.cancel()
            try:
                await self._cleanup_task
            except asyncio.CancelledError:
                pass
        self._cleanup_task = None
        await self.drain()

    async def _cleanup_loop(self) -> None:
        try:
            while True:
                await asyncio.sleep(self._sweep_interval)
                self.sweep()
        except asyncio.CancelledError:
            return


# Singleton manager used by the API layer
quiz_manager = QuizSessionManager()
