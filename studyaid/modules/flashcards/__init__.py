"""Flashcards module exports."""

from .models.flashcards import Flashcard, FlashcardDeck
from .parser import extract_flashcards, flashcard_extractor

__all__ = [
    "Flashcard",
    "FlashcardDeck",
    "extract_flashcards",
    "flashcard_extractor",
]
