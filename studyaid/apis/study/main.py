from __future__ import annotations

from datetime import datetime

from fastapi import APIRouter, HTTPException

from studyaid.core.config import settings
from studyaid.core.logging import get_logger, log_context
from studyaid.apis.study.schemas import (
    ExtractRequest,
    ExtractResponse,
    GenerateRequest,
    GenerateResponse,
    MarkCardRequest,
)
from studyaid.modules.flashcards.models import FlashcardDeck
from studyaid.modules.flashcards.parser import extract_flashcards
from studyaid.modules.generation import ContentType, GenerationError, generate_content
from studyaid.modules.key_terms.parser import extract_key_terms
from studyaid.modules.quiz.parser import extract_quiz


logger = get_logger(__name__)
router = APIRouter()


def _extract(content_type: ContentType, text: str, title: str | None) -> ExtractResponse:
    if content_type == ContentType.QUIZ:
        questions = extract_quiz(text)
        return ExtractResponse(
            content_type=content_type,
            structured=bool(questions),
            count=len(questions),
            questions=questions,
            raw=None if questions else text,
        )
    if content_type == ContentType.FLASHCARDS:
        cards = extract_flashcards(text)
        deck = None
        if cards:
            deck = FlashcardDeck(
                name=(title or "").strip() or f"Deck {datetime.now():%Y-%m-%d %H:%M}",
                cards=cards,
            )
        return ExtractResponse(
            content_type=content_type,
            structured=bool(cards),
            count=len(cards),
            deck=deck,
            raw=None if cards else text,
        )
    result = extract_key_terms(text)
    return ExtractResponse(
        content_type=content_type,
        structured=result.structured,
        count=len(result.terms),
        key_terms=result,
        raw=None if result.structured else text,
    )


@router.post(
    f"/{settings.app.version}/extract/{{content_type}}",
    response_model=ExtractResponse,
    tags=["extract"],
)
async def extract(content_type: ContentType, req: ExtractRequest) -> ExtractResponse:
    res = _extract(content_type, req.text, req.title)
    if not res.structured:
        logger.info(
            "no structured records found, returning raw text",
            extra=log_context(content_type=content_type.value),
        )
    return res


@router.post(
    f"/{settings.app.version}/generate/{{content_type}}",
    response_model=GenerateResponse,
    tags=["generate"],
)
async def generate(content_type: ContentType, req: GenerateRequest) -> GenerateResponse:
    try:
        content = await generate_content(
            content_type,
            req.text,
            difficulty=req.difficulty,
            num_questions=req.num_questions,
        )
    except GenerationError as e:
        raise HTTPException(status_code=502, detail=f"Generation failed: {e}")
    parsed = _extract(content_type, content, req.title)
    return GenerateResponse(
        **parsed.model_dump(),
        content=content,
        is_mock=bool(settings.generation.use_mock),
    )


@router.post(
    f"/{settings.app.version}/flashcards/mark",
    response_model=FlashcardDeck,
    tags=["flashcards"],
)
async def mark_card(req: MarkCardRequest) -> FlashcardDeck:
    deck = req.deck
    if not deck.mark_mastered(req.index, req.mastered):
        raise HTTPException(status_code=422, detail="Card index out of range")
    return deck


@router.post(
    f"/{settings.app.version}/flashcards/reset",
    response_model=FlashcardDeck,
    tags=["flashcards"],
)
async def reset_deck(deck: FlashcardDeck) -> FlashcardDeck:
    deck.reset_progress()
    return deck
