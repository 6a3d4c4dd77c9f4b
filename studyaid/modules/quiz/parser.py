"""Recover multiple-choice questions from generated quiz text.

Three strategies, strictest first:

- ``parse_strict``: one regex over the canonical ``Q:/A:/B:/C:/D:/Correct:``
  block layout.
- ``parse_segments``: split on question markers, then look up each field
  inside its block independently.
- ``parse_lines``: walk line by line, accumulating a record until it has a
  question, four options and a valid correct letter.

Incomplete records are dropped, never repaired. Duplicates are kept.
"""

from __future__ import annotations

import re
from typing import Optional

from pydantic import ValidationError

from studyaid.modules.extraction.cascade import LINE_BREAK, PatternCascade, split_lines
from studyaid.modules.quiz.models import OPTION_KEYS, QuizQuestion

_CORRECT_LABEL = r"(?:Correct(?:[ \t]+Answer)?|Answer)"

STRICT_QUIZ_RE = re.compile(
    r"(?<![A-Za-z])Q(?:uestion)?:[ \t]*([^\r\n]*)" + LINE_BREAK
    + r"\s*A[.:][ \t]*([^\r\n]*)" + LINE_BREAK
    + r"\s*B[.:][ \t]*([^\r\n]*)" + LINE_BREAK
    + r"\s*C[.:][ \t]*([^\r\n]*)" + LINE_BREAK
    + r"\s*D[.:][ \t]*([^\r\n]*)" + LINE_BREAK
    + r"\s*" + _CORRECT_LABEL + r":[ \t]*\(?([A-D])(?![A-Za-z])"
)

_SEGMENT_SPLIT_RE = re.compile(r"\n\s*(?=Q(?:uestion)?:)")
_SEGMENT_QUESTION_RE = re.compile(r"Q(?:uestion)?:[ \t]*([^\n]*)")
_SEGMENT_OPTION_RES = {
    key: re.compile(r"^[ \t]*" + key + r"[.:)][ \t]*([^\n]*)", re.MULTILINE)
    for key in OPTION_KEYS
}
_SEGMENT_CORRECT_RE = re.compile(
    r"^[ \t]*" + _CORRECT_LABEL + r"[ \t]*:[ \t]*\(?([A-D])(?![A-Za-z])",
    re.MULTILINE | re.IGNORECASE,
)

_LINE_QUESTION_RE = re.compile(r"^(?:Q:|Question:|\d+[.)]\s*(?![A-D](?:[.:)]|\s|$))\S)")
_LINE_QUESTION_PREFIX_RE = re.compile(r"^(?:Q(?:uestion)?:|\d+[.)])\s*")
_LINE_OPTION_RE = re.compile(r"^([A-D])(?:[.:]|\)\s)\s*(.*)$")
_LINE_CORRECT_LABEL_RE = re.compile(r"^" + _CORRECT_LABEL + r"\s*:", re.IGNORECASE)
_LINE_CORRECT_RE = re.compile(
    r"^" + _CORRECT_LABEL + r"\s*(?::\s*|\s+)\(?([A-D])(?![A-Za-z])",
    re.IGNORECASE,
)


def _normalize_breaks(text: str) -> str:
    return re.sub(LINE_BREAK, "\n", text or "")


def build_question(
    question: Optional[str],
    options: dict[str, Optional[str]],
    correct: Optional[str],
) -> Optional[QuizQuestion]:
    """Validated question, or None when any field is missing or blank."""
    letter = (correct or "").strip().upper()
    if letter not in OPTION_KEYS:
        return None
    fields = [question, *(options.get(k) for k in OPTION_KEYS)]
    if any(not (f or "").strip() for f in fields):
        return None
    try:
        return QuizQuestion(
            question=question,
            options={k: options[k] for k in OPTION_KEYS},
            correct=letter,
        )
    except ValidationError:
        return None


def parse_strict(text: str) -> list[QuizQuestion]:
    out: list[QuizQuestion] = []
    for m in STRICT_QUIZ_RE.finditer(text or ""):
        q = build_question(
            m.group(1),
            dict(zip(OPTION_KEYS, m.group(2, 3, 4, 5))),
            m.group(6),
        )
        if q:
            out.append(q)
    return out


def _parse_segment(block: str) -> Optional[QuizQuestion]:
    qm = _SEGMENT_QUESTION_RE.search(block)
    if not qm:
        return None
    options: dict[str, Optional[str]] = {}
    for key, rx in _SEGMENT_OPTION_RES.items():
        om = rx.search(block, qm.end())
        options[key] = om.group(1) if om else None
    cm = _SEGMENT_CORRECT_RE.search(block, qm.end())
    return build_question(qm.group(1), options, cm.group(1) if cm else None)


def parse_segments(text: str) -> list[QuizQuestion]:
    blocks = _SEGMENT_SPLIT_RE.split(_normalize_breaks(text))
    out: list[QuizQuestion] = []
    for block in blocks:
        if not block.strip():
            continue
        q = _parse_segment(block)
        if q:
            out.append(q)
    return out


class _PendingQuestion:
    """Mutable accumulator for the line scanner."""

    def __init__(self, question: str) -> None:
        self.question = question
        self.options: dict[str, Optional[str]] = {k: None for k in OPTION_KEYS}
        self.correct: Optional[str] = None

    def complete(self) -> Optional[QuizQuestion]:
        return build_question(self.question, self.options, self.correct)


def parse_lines(text: str) -> list[QuizQuestion]:
    out: list[QuizQuestion] = []
    pending: Optional[_PendingQuestion] = None

    def flush() -> bool:
        if pending is None:
            return False
        q = pending.complete()
        if q:
            out.append(q)
        return q is not None

    for line in split_lines(text):
        if _LINE_QUESTION_RE.match(line):
            flush()
            pending = _PendingQuestion(_LINE_QUESTION_PREFIX_RE.sub("", line).strip())
            continue

        om = _LINE_OPTION_RE.match(line)
        if om:
            if pending is not None:
                pending.options[om.group(1)] = om.group(2).strip()
            continue

        if _LINE_CORRECT_LABEL_RE.match(line) or _LINE_CORRECT_RE.match(line):
            cm = _LINE_CORRECT_RE.match(line)
            if pending is not None and cm:
                pending.correct = cm.group(1).upper()
            if flush():
                pending = None

    flush()
    return out


QUIZ_STRATEGIES = (parse_strict, parse_segments, parse_lines)

quiz_extractor: PatternCascade[QuizQuestion] = PatternCascade(
    QUIZ_STRATEGIES, name="quiz"
)


def extract_quiz(text: str) -> list[QuizQuestion]:
    """Parse quiz text into questions; ``[]`` when nothing is recognizable."""
    return quiz_extractor.run(text)
