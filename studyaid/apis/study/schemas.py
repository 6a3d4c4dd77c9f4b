from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field

from studyaid.modules.flashcards.models import FlashcardDeck
from studyaid.modules.generation.prompts import ContentType, Difficulty
from studyaid.modules.key_terms.models import KeyTermsResult
from studyaid.modules.quiz.models import QuizQuestion


class ExtractRequest(BaseModel):
    text: str = Field(..., description="Raw generated text to parse")
    title: Optional[str] = Field(default=None, description="Deck name for flashcards")


class GenerateRequest(BaseModel):
    text: str = Field(..., description="Source notes to generate from")
    title: Optional[str] = None
    difficulty: Difficulty = Difficulty.MEDIUM
    num_questions: int = Field(default=5, ge=1, le=40)


class ExtractResponse(BaseModel):
    content_type: ContentType
    structured: bool
    count: int = 0
    questions: Optional[list[QuizQuestion]] = None
    deck: Optional[FlashcardDeck] = None
    key_terms: Optional[KeyTermsResult] = None
    # Input text, returned when nothing could be parsed
    raw: Optional[str] = None


class GenerateResponse(ExtractResponse):
    content: str
    is_mock: bool = False


class MarkCardRequest(BaseModel):
    deck: FlashcardDeck
    index: int = Field(..., ge=0, description="Position of the card in the deck")
    mastered: bool = True
