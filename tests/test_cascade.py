"""Tests for the strategy cascade and its helpers."""

import pytest

from studyaid.modules.extraction.cascade import PatternCascade, dedupe_by, split_lines
from studyaid.modules.flashcards.parser import FLASHCARD_STRATEGIES, extract_flashcards
from studyaid.modules.key_terms.parser import KEY_TERM_STRATEGIES, extract_key_terms
from studyaid.modules.quiz.parser import QUIZ_STRATEGIES, extract_quiz

from .conftest import PROSE


class TestPatternCascade:
    """Ordering and failure handling of the cascade."""

    def test_first_non_empty_result_wins(self) -> None:
        """Later strategies must not run once one matched."""
        calls = []

        def empty(text):
            calls.append("empty")
            return []

        def hit(text):
            calls.append("hit")
            return ["a"]

        def never(text):
            calls.append("never")
            return ["b"]

        cascade = PatternCascade([empty, hit, never], name="t")
        assert cascade.run("anything") == ["a"]
        assert calls == ["empty", "hit"]

    def test_blank_input_short_circuits(self) -> None:
        """Blank text yields [] without calling any strategy."""
        calls = []
        cascade = PatternCascade([lambda t: calls.append(t) or ["x"]])
        assert cascade.run("   \n ") == []
        assert cascade.run("") == []
        assert calls == []

    def test_failing_strategy_is_skipped(self) -> None:
        """A raising strategy counts as empty."""

        def boom(text):
            raise RuntimeError("bad regex day")

        cascade = PatternCascade([boom, lambda t: [1, 2]])
        assert cascade("text") == [1, 2]

    def test_all_strategies_fail(self) -> None:
        """No exception escapes when every strategy raises."""

        def boom(text):
            raise ValueError("nope")

        assert PatternCascade([boom, boom]).run("text") == []

    def test_requires_strategies(self) -> None:
        with pytest.raises(ValueError):
            PatternCascade([])

    def test_len(self) -> None:
        assert len(PatternCascade([lambda t: [], lambda t: []])) == 2


class TestHelpers:
    """Line splitting and dedupe."""

    def test_split_lines_mixed_breaks(self) -> None:
        """CRLF, CR and LF are all line breaks; blanks are dropped."""
        assert split_lines("one\r\ntwo\rthree\n\n  four  ") == ["one", "two", "three", "four"]

    def test_dedupe_keeps_first(self) -> None:
        items = [("a", 1), ("b", 2), ("a", 3)]
        assert dedupe_by(items, key=lambda x: x[0]) == [("a", 1), ("b", 2)]


class TestUnstructuredProse:
    """Every extractor degrades to empty on plain prose."""

    def test_all_extractors_empty(self) -> None:
        for strategy in (*QUIZ_STRATEGIES, *FLASHCARD_STRATEGIES, *KEY_TERM_STRATEGIES):
            assert strategy(PROSE) == [], strategy.__name__
        assert extract_quiz(PROSE) == []
        assert extract_flashcards(PROSE) == []
        result = extract_key_terms(PROSE)
        assert not result.structured
        assert result.paragraphs == [PROSE]
