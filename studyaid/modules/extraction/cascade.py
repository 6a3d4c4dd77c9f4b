"""Ordered strict-to-lenient extraction strategies.

A cascade holds a list of plain functions ``str -> list[T]``. They are tried
in order and the first non-empty result wins; later strategies never run.
Malformed input never raises out of a cascade: it degrades to ``[]`` and the
caller decides how to show the raw text instead.
"""

from __future__ import annotations

import re
from typing import Callable, Generic, Hashable, Iterable, Sequence, TypeVar

from studyaid.core.logging import get_logger

T = TypeVar("T")

Strategy = Callable[[str], list[T]]

logger = get_logger(__name__)

# Mixed line-break styles (\r\n, \r, \n) all count as one break.
LINE_BREAK = r"(?:\r\n|\r|\n)"


def split_lines(text: str) -> list[str]:
    """Trimmed, non-empty lines regardless of line-break style."""
    return [ln.strip() for ln in re.split(LINE_BREAK, text or "") if ln.strip()]


def dedupe_by(items: Iterable[T], key: Callable[[T], Hashable]) -> list[T]:
    """Keep the first item for each key, preserving input order."""
    seen: set[Hashable] = set()
    out: list[T] = []
    for item in items:
        k = key(item)
        if k in seen:
            continue
        seen.add(k)
        out.append(item)
    return out


class PatternCascade(Generic[T]):
    """Runs strategies in priority order until one yields records."""

    def __init__(self, strategies: Sequence[Strategy], *, name: str = "cascade") -> None:
        if not strategies:
            raise ValueError("a cascade needs at least one strategy")
        self.strategies: tuple[Strategy, ...] = tuple(strategies)
        self.name = name

    def run(self, text: str) -> list[T]:
        if not text or not text.strip():
            return []
        for strategy in self.strategies:
            label = getattr(strategy, "__name__", repr(strategy))
            try:
                found = strategy(text)
            except Exception:  # noqa: BLE001
                logger.warning(
                    "%s: strategy %s failed, treating as empty",
                    self.name,
                    label,
                    exc_info=True,
                )
                continue
            if found:
                logger.debug("%s: %s matched %d records", self.name, label, len(found))
                return list(found)
        logger.debug("%s: no strategy matched", self.name)
        return []

    __call__ = run

    def __len__(self) -> int:
        return len(self.strategies)
