"""Tests for settings and logging helpers."""

import logging

from studyaid.core.config import AppSettings, GenerationSettings
from studyaid.core.logging import ContextFilter, log_context


class TestSettings:
    def test_allowed_origins(self) -> None:
        app = AppSettings(CORS_ORIGINS="http://a.test, http://b.test,")
        assert app.allowed_origins == ["http://a.test", "http://b.test"]

    def test_use_mock_without_key(self) -> None:
        gen = GenerationSettings(MOCK_MODE=False, MODEL_PROVIDER="google", GEMINI_API_KEY=None)
        assert gen.use_mock

    def test_use_mock_with_key(self) -> None:
        gen = GenerationSettings(MOCK_MODE=False, MODEL_PROVIDER="google", GEMINI_API_KEY="k")
        assert not gen.use_mock


class TestLogging:
    def test_log_context_defaults(self) -> None:
        assert log_context() == {"session": "-", "content_type": "-"}
        assert log_context("abc", "quiz") == {"session": "abc", "content_type": "quiz"}

    def test_filter_fills_missing_fields(self) -> None:
        record = logging.LogRecord("t", logging.INFO, __file__, 1, "msg", None, None)
        assert ContextFilter().filter(record)
        assert record.session == "-"
        assert record.content_type == "-"
