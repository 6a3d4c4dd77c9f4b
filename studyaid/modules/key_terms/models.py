"""Pydantic models for glossary extraction."""

from __future__ import annotations

from typing import Annotated, Optional

from pydantic import AfterValidator, BaseModel, Field, computed_field


def _not_blank(v: str) -> str:
    v = (v or "").strip()
    if not v:
        raise ValueError("must not be empty")
    return v


class KeyTermEntry(BaseModel):
    term: Annotated[str, AfterValidator(_not_blank)]
    definition: Annotated[str, AfterValidator(_not_blank)]


class KeyTermsResult(BaseModel):
    """Parsed glossary plus whatever was carried through unparsed.

    ``formulas`` is the verbatim text after a trailing ``Formulas:`` heading.
    ``paragraphs`` is only filled when no terms were found, so callers can
    show the input text instead.
    """

    terms: list[KeyTermEntry] = Field(default_factory=list)
    formulas: Optional[str] = None
    paragraphs: list[str] = Field(default_factory=list)

    @computed_field
    def structured(self) -> bool:
        return bool(self.terms)

    def to_text(self) -> str:
        if not self.terms:
            return "\n\n".join(self.paragraphs)
        parts = ["Key Terms", ""]
        for entry in self.terms:
            parts.append(f"{entry.term}: {entry.definition}")
        if self.formulas:
            parts.extend(["", "Formulas", self.formulas])
        return "\n".join(parts)
