"""Raw study-text generation via pydantic-ai.

Provides:
- async generate_content(content_type, text, ...) -> str
- generate_content_sync(...) for CLIs and scripts

The model always returns plain text; structure is recovered afterwards by the
extractors. Provider imports stay lazy so a missing key only matters when a
real call is made. With MOCK_MODE or no key configured, canned responses are
returned instead.
"""

from __future__ import annotations

import asyncio

from pydantic_ai import Agent

from studyaid.core.config import settings
from studyaid.core.logging import get_logger, log_context
from studyaid.modules.generation.prompts import (
    MOCK_RESPONSES,
    ContentType,
    Difficulty,
    build_prompt,
)

logger = get_logger(__name__)


class GenerationError(RuntimeError):
    """The text-generation provider failed or returned nothing."""


SYSTEM_PROMPT = (
    "You are an expert educator who turns study notes into review material. "
    "Follow the requested output format exactly, in plain text. "
    "Do not include code fences or commentary."
)


def _build_google_model():
    """Build Google Gemini model for pydantic-ai (lazy import)."""
    from pydantic_ai.models.google import GoogleModel
    from pydantic_ai.providers.google import GoogleProvider

    provider = GoogleProvider(api_key=settings.generation.gemini_api_key)
    return GoogleModel(settings.generation.gemini_model, provider=provider)


def _build_openrouter_model():
    """Build OpenRouter model via OpenAI-compatible provider (lazy import)."""
    from pydantic_ai.models.openai import OpenAIChatModel
    from pydantic_ai.providers.openai import OpenAIProvider

    if not settings.generation.openrouter_api_key:
        raise GenerationError(
            "OpenRouter API key not configured. Set OPENROUTER_API_KEY in your environment."
        )

    provider = OpenAIProvider(
        api_key=settings.generation.openrouter_api_key,
        base_url="https://openrouter.ai/api/v1",
    )
    return OpenAIChatModel(settings.generation.openrouter_model, provider=provider)


def _build_model_by_settings():
    provider = (settings.generation.model_provider or "google").lower()
    if provider == "openrouter":
        return _build_openrouter_model()
    return _build_google_model()


def _build_agent() -> Agent[None, str]:
    return Agent[None, str](
        model=_build_model_by_settings(),
        output_type=str,
        system_prompt=SYSTEM_PROMPT,
        retries=settings.generation.retries,
    )


async def generate_content(
    content_type: ContentType,
    text: str,
    *,
    difficulty: Difficulty = Difficulty.MEDIUM,
    num_questions: int = 5,
) -> str:
    """Generate raw study text for one content type.

    Raises GenerationError when the provider fails or returns empty output.
    """
    content_type = ContentType(content_type)
    if not (text or "").strip():
        raise GenerationError("no source text given")

    if settings.generation.use_mock:
        logger.info(
            "generation: serving mock response",
            extra=log_context(content_type=content_type.value),
        )
        return MOCK_RESPONSES[content_type]

    prompt = build_prompt(
        content_type, text, difficulty=difficulty, num_questions=num_questions
    )
    try:
        agent = _build_agent()
        res = await agent.run(prompt)
    except GenerationError:
        raise
    except Exception as e:  # noqa: BLE001
        logger.warning(
            "generation: provider call failed: %s",
            e,
            extra=log_context(content_type=content_type.value),
        )
        raise GenerationError(str(e)) from e

    output = (res.output or "").strip()
    if not output:
        raise GenerationError("provider returned empty content")
    return output


def generate_content_sync(
    content_type: ContentType,
    text: str,
    *,
    difficulty: Difficulty = Difficulty.MEDIUM,
    num_questions: int = 5,
) -> str:
    """Synchronous wrapper if an event loop is unavailable."""
    return asyncio.run(
        generate_content(
            content_type, text, difficulty=difficulty, num_questions=num_questions
        )
    )
