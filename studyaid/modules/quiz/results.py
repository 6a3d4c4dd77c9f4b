"""Recording of completed quiz attempts.

The session engine only knows the ``ResultRecorder`` protocol. The in-memory
recorder is what the API wires in; durable storage can implement the same
single coroutine.
"""

from __future__ import annotations

from collections import deque
from typing import Optional, Protocol, runtime_checkable

from studyaid.core.config import settings
from studyaid.modules.quiz.models import QuizResult


def percentage(score: int, total: int) -> int:
    if total <= 0:
        return 0
    return round(score * 100 / total)


@runtime_checkable
class ResultRecorder(Protocol):
    async def record(self, score: int, total: int, correct: int) -> QuizResult:
        """Persist one attempt: ``score`` is a percentage, ``correct`` the raw count."""
        ...


class InMemoryResultRecorder:
    """Keeps the most recent results in-process, oldest dropped first.

    Meant for development and tests; nothing survives a restart.
    """

    def __init__(self, max_results: Optional[int] = None) -> None:
        limit = settings.quiz.results_limit if max_results is None else max_results
        self._results: deque[QuizResult] = deque(maxlen=max(1, int(limit)))

    async def record(self, score: int, total: int, correct: int) -> QuizResult:
        if total <= 0:
            raise ValueError("total must be positive")
        if not 0 <= correct <= total:
            raise ValueError("correct must be within [0, total]")
        result = QuizResult(score=score, questions=total, correct=correct)
        self._results.append(result)
        return result

    def results(self) -> list[QuizResult]:
        """Newest first."""
        return list(reversed(self._results))

    def clear(self) -> None:
        self._results.clear()
