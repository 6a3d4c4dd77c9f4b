"""Pydantic models for quiz questions and quiz session snapshots.

Questions are produced by the text extractors in ``parser`` and consumed by
the in-memory session engine in ``state``. Snapshots are what the API layer
returns after every transition.
"""

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from typing import Annotated, Optional

from pydantic import AfterValidator, BaseModel, Field, field_validator


class OptionKey(str, Enum):
    A = "A"
    B = "B"
    C = "C"
    D = "D"


OPTION_KEYS: tuple[str, ...] = tuple(k.value for k in OptionKey)


def _not_blank(v: str) -> str:
    v = (v or "").strip()
    if not v:
        raise ValueError("must not be empty")
    return v


NonBlank = Annotated[str, AfterValidator(_not_blank)]


class QuizOptions(BaseModel):
    """The four lettered answer choices."""

    A: NonBlank
    B: NonBlank
    C: NonBlank
    D: NonBlank

    def get(self, key: OptionKey | str) -> str:
        return getattr(self, OptionKey(key).value)


class QuizQuestion(BaseModel):
    """A single multiple-choice question with four options."""

    question: NonBlank
    options: QuizOptions
    correct: OptionKey

    @field_validator("correct", mode="before")
    @classmethod
    def normalize_correct(cls, v):
        if isinstance(v, str):
            return v.strip().upper()
        return v

    def is_correct(self, key: OptionKey | str | None) -> bool:
        if key is None:
            return False
        return OptionKey(key) == self.correct


class SessionPhase(str, Enum):
    ANSWERING = "answering"
    RESULTS = "results"
    REVIEWING = "reviewing"


class ResultSummary(BaseModel):
    score: int
    total: int
    percentage: int
    message: str
    description: str


class QuizSessionState(BaseModel):
    """Snapshot of a session, published on every transition."""

    id: Optional[str] = None
    phase: SessionPhase
    questions: list[QuizQuestion] = Field(default_factory=list)
    current_index: int = 0
    current_question: Optional[QuizQuestion] = None
    answers: dict[int, OptionKey] = Field(default_factory=dict)
    review_index: int = 0
    attempt: int = 1
    total: int = 0
    score: Optional[int] = None
    summary: Optional[ResultSummary] = None
    pending_transition: bool = False


class QuizResult(BaseModel):
    """A completed attempt as handed to the result recorder."""

    score: int = Field(description="Percentage, 0-100")
    questions: int
    correct: int
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
