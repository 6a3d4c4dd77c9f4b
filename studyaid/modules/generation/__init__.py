"""Generation module exports."""

from .generator import GenerationError, generate_content, generate_content_sync
from .prompts import ContentType, Difficulty, build_prompt

__all__ = [
    "ContentType",
    "Difficulty",
    "GenerationError",
    "build_prompt",
    "generate_content",
    "generate_content_sync",
]
