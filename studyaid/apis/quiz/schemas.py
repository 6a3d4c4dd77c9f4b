from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field, model_validator

from studyaid.modules.quiz.models import OptionKey, QuizQuestion, QuizResult, QuizSessionState


class CreateSessionRequest(BaseModel):
    text: Optional[str] = Field(default=None, description="Raw generated quiz text")
    questions: Optional[list[QuizQuestion]] = Field(
        default=None, description="Already parsed questions"
    )

    @model_validator(mode="after")
    def check_source(self) -> "CreateSessionRequest":
        if (self.text is None) == (self.questions is None):
            raise ValueError("provide exactly one of text or questions")
        return self


class AnswerRequest(BaseModel):
    key: OptionKey


class SessionResponse(BaseModel):
    session_id: str
    state: QuizSessionState


class ActionResponse(BaseModel):
    applied: bool
    state: QuizSessionState


class ResultsResponse(BaseModel):
    results: list[QuizResult] = Field(default_factory=list)
