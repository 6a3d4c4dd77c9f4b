"""Pydantic models for extracted flashcards.

Cards come out of the text extractors with ``mastered=False``; the flag is
only ever changed through ``FlashcardDeck.mark_mastered`` and
``reset_progress``.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Annotated, Optional

from pydantic import AfterValidator, BaseModel, Field, computed_field


def _not_blank(v: str) -> str:
    v = (v or "").strip()
    if not v:
        raise ValueError("must not be empty")
    return v


class Flashcard(BaseModel):
    """Simple question/answer flashcard."""

    id: Optional[str] = None
    question: Annotated[str, AfterValidator(_not_blank)]
    answer: Annotated[str, AfterValidator(_not_blank)]
    mastered: bool = False


class FlashcardDeck(BaseModel):
    """A named batch of cards produced from one piece of generated text."""

    name: str
    cards: list[Flashcard] = Field(default_factory=list)
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    last_studied: Optional[datetime] = None

    @computed_field
    def progress(self) -> int:
        """Percentage of mastered cards."""
        if not self.cards:
            return 0
        mastered = sum(1 for c in self.cards if c.mastered)
        return round(mastered * 100 / len(self.cards))

    def mark_mastered(self, index: int, mastered: bool = True) -> bool:
        """Set one card's mastered flag. False when ``index`` is out of range."""
        if not 0 <= index < len(self.cards):
            return False
        self.cards[index].mastered = mastered
        self.last_studied = datetime.now(timezone.utc)
        return True

    def reset_progress(self) -> None:
        for card in self.cards:
            card.mastered = False
        self.last_studied = datetime.now(timezone.utc)
