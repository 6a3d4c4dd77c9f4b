"""Shared fixtures for the studyaid test suite."""

import pytest

from studyaid.core.config import settings
from studyaid.modules.quiz.models import QuizQuestion
from studyaid.modules.quiz.results import InMemoryResultRecorder
from studyaid.modules.quiz.state import QuizSessionManager, quiz_manager

STRICT_QUIZ = """Q: What is 2 + 2?
A: 3
B: 4
C: 5
D: 6
Correct: B

Q: What is the capital of France?
A: Berlin
B: Madrid
C: Paris
D: Rome
Correct: C"""

TAGGED_FLASHCARDS = """Q: What is osmosis?
A: Movement of water across a semi-permeable membrane.

Q: What is diffusion?
A: Spread of particles from high to low concentration."""

KEY_TERMS = """Term: Osmosis
Definition: Movement of water across a semi-permeable membrane.

Term: Diffusion
Definition: Spread of particles from high to low concentration.

Formulas:
Rate = Distance / Time"""

PROSE = "The mitochondria is where most cellular respiration happens in eukaryotic cells."


def make_question(n: int, correct: str = "B") -> QuizQuestion:
    return QuizQuestion(
        question=f"Question number {n}?",
        options={"A": "first", "B": "second", "C": "third", "D": "fourth"},
        correct=correct,
    )


@pytest.fixture
def questions() -> list[QuizQuestion]:
    """Three questions, all answered correctly with B."""
    return [make_question(i) for i in range(1, 4)]


@pytest.fixture
def recorder() -> InMemoryResultRecorder:
    return InMemoryResultRecorder()


@pytest.fixture
def manager(recorder: InMemoryResultRecorder) -> QuizSessionManager:
    return QuizSessionManager(recorder=recorder)


@pytest.fixture
def mock_generation(monkeypatch):
    """Force canned generation responses."""
    monkeypatch.setattr(settings.generation, "mock_mode", True)


@pytest.fixture
def slow_transitions(monkeypatch):
    """Keep auto-advance timers from firing during a test."""
    monkeypatch.setattr(settings.quiz, "correct_delay", 300.0)
    monkeypatch.setattr(settings.quiz, "incorrect_delay", 300.0)


@pytest.fixture
def clean_quiz_manager():
    """Reset the API singleton between tests."""
    yield quiz_manager
    for sid in list(quiz_manager.sessions):
        quiz_manager.discard(sid)
    quiz_manager.recorder.clear()
