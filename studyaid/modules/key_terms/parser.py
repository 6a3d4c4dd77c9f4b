"""Recover term/definition pairs from generated glossary text.

A trailing ``Formulas:`` section is split off first and carried through as
is. The rest goes through the cascade:

1. ``parse_blocks``: ``Term:`` line followed by a (possibly multi-line)
   ``Definition:``.
2. ``parse_line_pairs``: ``Term:`` opens a pending term, the next
   ``Definition:`` with text closes it.
3. ``parse_inverted``: ``Definition:`` written before its ``Term:``.
4. ``parse_bullets``: consecutive plain or bulleted lines, two at a time.

Within one batch the first occurrence of a term wins.
"""

from __future__ import annotations

import re
from functools import wraps
from typing import Callable, Optional

from studyaid.modules.extraction.cascade import (
    LINE_BREAK,
    PatternCascade,
    dedupe_by,
    split_lines,
)
from studyaid.modules.key_terms.models import KeyTermEntry, KeyTermsResult

FORMULAS_RE = re.compile(
    r"^[ \t]*(?:[#*]+[ \t]*)?formulas(?:[ \t]*\**)?[ \t]*(?::|$)\**",
    re.IGNORECASE | re.MULTILINE,
)

_BLOCK_RE = re.compile(
    r"Term:[ \t]*([^\n]*?)[ \t]*\n\s*Definition:[ \t]*(.*?)(?=\n\s*Term:|\Z)",
    re.DOTALL,
)
_INVERTED_RE = re.compile(
    r"Definition:[ \t]*([^\n]*?)[ \t]*\n\s*Term:[ \t]*(.*?)(?=\n\s*Definition:|\Z)",
    re.DOTALL,
)
_TERM_LINE_RE = re.compile(r"^\**\s*Term\s*:\s*\**\s*(.*)$", re.IGNORECASE)
_DEFINITION_LINE_RE = re.compile(r"^\**\s*Definition\s*:\s*\**\s*(.*)$", re.IGNORECASE)
_BULLET_RE = re.compile(r"^(?:[•\-*]+|\d+\.)\s*")
_HEADINGS = ("key terms", "formulas")
_BLANK_LINES_RE = re.compile(r"\n\s*\n")


def _normalize_breaks(text: str) -> str:
    return re.sub(LINE_BREAK, "\n", text or "")


def _entry(term: Optional[str], definition: Optional[str]) -> Optional[KeyTermEntry]:
    t = (term or "").strip().strip("*").strip()
    d = (definition or "").strip()
    if not t or not d:
        return None
    return KeyTermEntry(term=t, definition=d)


def _unique(fn: Callable[[str], list[KeyTermEntry]]) -> Callable[[str], list[KeyTermEntry]]:
    @wraps(fn)
    def wrapper(text: str) -> list[KeyTermEntry]:
        return dedupe_by(fn(text), key=lambda e: e.term)

    return wrapper


def split_formulas(text: str) -> tuple[str, Optional[str]]:
    """Split off a ``Formulas:`` section; returns (terms_text, formulas)."""
    text = _normalize_breaks(text)
    m = FORMULAS_RE.search(text)
    if not m:
        return text, None
    formulas = text[m.end():].strip()
    return text[: m.start()].strip(), (formulas or None)


@_unique
def parse_blocks(text: str) -> list[KeyTermEntry]:
    out = []
    for m in _BLOCK_RE.finditer(_normalize_breaks(text)):
        e = _entry(m.group(1), m.group(2))
        if e:
            out.append(e)
    return out


@_unique
def parse_line_pairs(text: str) -> list[KeyTermEntry]:
    out = []
    pending: Optional[str] = None
    for line in split_lines(text):
        tm = _TERM_LINE_RE.match(line)
        if tm:
            pending = tm.group(1).strip() or None
            continue
        dm = _DEFINITION_LINE_RE.match(line)
        if dm and pending and dm.group(1).strip():
            e = _entry(pending, dm.group(1))
            if e:
                out.append(e)
            pending = None
    return out


@_unique
def parse_inverted(text: str) -> list[KeyTermEntry]:
    out = []
    for m in _INVERTED_RE.finditer(_normalize_breaks(text)):
        e = _entry(m.group(2), m.group(1))
        if e:
            out.append(e)
    return out


# Longer lines are content even when they mention a heading word
MAX_HEADING_WORDS = 4


def _is_heading(line: str) -> bool:
    low = line.lower()
    return len(low.split()) <= MAX_HEADING_WORDS and any(h in low for h in _HEADINGS)


@_unique
def parse_bullets(text: str) -> list[KeyTermEntry]:
    lines = [_BULLET_RE.sub("", ln).strip() for ln in split_lines(text)]
    # Drop headings before pairing
    lines = [ln for ln in lines if ln and not _is_heading(ln)]
    out = []
    for i in range(0, len(lines) - 1, 2):
        if any(h in lines[i].lower() for h in _HEADINGS):
            continue
        e = _entry(lines[i], lines[i + 1])
        if e:
            out.append(e)
    return out


KEY_TERM_STRATEGIES = (parse_blocks, parse_line_pairs, parse_inverted, parse_bullets)

key_term_extractor: PatternCascade[KeyTermEntry] = PatternCascade(
    KEY_TERM_STRATEGIES, name="key_terms"
)


def split_paragraphs(text: str) -> list[str]:
    return [p.strip() for p in _BLANK_LINES_RE.split(_normalize_breaks(text)) if p.strip()]


def extract_key_terms(text: str) -> KeyTermsResult:
    """Parse glossary text.

    When nothing structured is found the result carries the input text
    split into paragraphs and ``structured`` is False.
    """
    terms_text, formulas = split_formulas(text)
    terms = key_term_extractor.run(terms_text)
    if not terms:
        return KeyTermsResult(formulas=formulas, paragraphs=split_paragraphs(text))
    return KeyTermsResult(terms=terms, formulas=formulas)
