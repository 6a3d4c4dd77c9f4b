"""Recover question/answer flashcards from generated text.

Strategies, strictest first: ``Q:/A:`` tags, ``Question:/Answer:`` labels,
lines ending in ``?`` followed by their answer, and finally plain lines taken
two at a time. A pair missing either side is dropped.
"""

from __future__ import annotations

import re
from typing import Optional

from studyaid.modules.extraction.cascade import LINE_BREAK, PatternCascade, split_lines
from studyaid.modules.flashcards.models.flashcards import Flashcard

# Alternating-line pairs shorter than this are treated as noise.
MIN_LINE_LENGTH = 5

_TAGGED_RE = re.compile(
    r"(?<!\w)Q:\s*((?:(?!\n\s*Q:).)*?)\s*\n\s*A:[ \t]*((?:(?!\n\s*Q:).)*?)(?=\n\s*Q:|\Z)",
    re.DOTALL,
)
_LABELED_RE = re.compile(
    r"(?<!\w)Question:\s*((?:(?!\n\s*Question:).)*?)\s*\n\s*Answer:[ \t]*"
    r"((?:(?!\n\s*Question:).)*?)(?=\n\s*Question:|\Z)",
    re.DOTALL | re.IGNORECASE,
)
_HEADER_WORDS_RE = re.compile(r"question|answer", re.IGNORECASE)


def _card(question: Optional[str], answer: Optional[str]) -> Optional[Flashcard]:
    q = (question or "").strip()
    a = (answer or "").strip()
    if not q or not a:
        return None
    return Flashcard(question=q, answer=a, mastered=False)


def _from_pattern(rx: re.Pattern, text: str) -> list[Flashcard]:
    normalized = re.sub(LINE_BREAK, "\n", text or "")
    cards = (_card(m.group(1), m.group(2)) for m in rx.finditer(normalized))
    return [c for c in cards if c]


def parse_tagged(text: str) -> list[Flashcard]:
    return _from_pattern(_TAGGED_RE, text)


def parse_labeled(text: str) -> list[Flashcard]:
    return _from_pattern(_LABELED_RE, text)


def parse_question_marks(text: str) -> list[Flashcard]:
    lines = split_lines(text)
    out: list[Flashcard] = []
    i = 0
    while i < len(lines):
        if lines[i].endswith("?") and i + 1 < len(lines):
            card = _card(lines[i], lines[i + 1])
            if card:
                out.append(card)
            i += 2
            continue
        i += 1
    return out


def parse_alternating(text: str) -> list[Flashcard]:
    lines = split_lines(text)
    out: list[Flashcard] = []
    for i in range(0, len(lines) - 1, 2):
        q, a = lines[i], lines[i + 1]
        if len(q) < MIN_LINE_LENGTH or len(a) < MIN_LINE_LENGTH:
            continue
        if _HEADER_WORDS_RE.search(q) or _HEADER_WORDS_RE.search(a):
            continue
        card = _card(q, a)
        if card:
            out.append(card)
    return out


FLASHCARD_STRATEGIES = (
    parse_tagged,
    parse_labeled,
    parse_question_marks,
    parse_alternating,
)

flashcard_extractor: PatternCascade[Flashcard] = PatternCascade(
    FLASHCARD_STRATEGIES, name="flashcards"
)


def extract_flashcards(text: str) -> list[Flashcard]:
    """Parse flashcard text; every card gets a positional id and mastered=False."""
    cards = flashcard_extractor.run(text)
    return [
        c.model_copy(update={"id": f"card-{n}"}) for n, c in enumerate(cards, start=1)
    ]
