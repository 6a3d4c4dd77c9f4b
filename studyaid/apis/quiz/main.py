from __future__ import annotations

from typing import Callable

from fastapi import APIRouter, HTTPException, Response, status

from studyaid.core.config import settings
from studyaid.apis.quiz.schemas import (
    ActionResponse,
    AnswerRequest,
    CreateSessionRequest,
    ResultsResponse,
    SessionResponse,
)
from studyaid.modules.quiz.results import InMemoryResultRecorder
from studyaid.modules.quiz.state import NoQuestionsFound, QuizSession, quiz_manager


router = APIRouter()

_PREFIX = f"/{settings.app.version}/quiz/sessions"


def _get_session(session_id: str) -> QuizSession:
    session = quiz_manager.get_session(session_id)
    if not session:
        raise HTTPException(status_code=404, detail="Session not found")
    return session


def _act(session_id: str, action: Callable[[QuizSession], object]) -> ActionResponse:
    session = _get_session(session_id)
    applied = action(session)
    return ActionResponse(applied=bool(applied), state=session.snapshot())


@router.post(
    _PREFIX,
    response_model=SessionResponse,
    status_code=status.HTTP_201_CREATED,
    tags=["quiz"],
)
async def create_session(req: CreateSessionRequest) -> SessionResponse:
    try:
        if req.questions is not None:
            if not req.questions:
                raise NoQuestionsFound("")
            session = quiz_manager.create_session(req.questions)
        else:
            session = quiz_manager.create_from_text(req.text or "")
    except NoQuestionsFound as e:
        raise HTTPException(
            status_code=422,
            detail={"message": "No quiz questions could be parsed", "raw": e.raw},
        )
    return SessionResponse(session_id=session.id, state=session.snapshot())


@router.get(
    f"/{settings.app.version}/quiz/results",
    response_model=ResultsResponse,
    tags=["quiz"],
)
async def list_results() -> ResultsResponse:
    recorder = quiz_manager.recorder
    if isinstance(recorder, InMemoryResultRecorder):
        return ResultsResponse(results=recorder.results())
    return ResultsResponse()


@router.get(
    f"{_PREFIX}/{{session_id}}",
    response_model=SessionResponse,
    tags=["quiz"],
)
async def get_session(session_id: str) -> SessionResponse:
    session = _get_session(session_id)
    return SessionResponse(session_id=session_id, state=session.snapshot())


@router.delete(
    f"{_PREFIX}/{{session_id}}",
    status_code=status.HTTP_204_NO_CONTENT,
    tags=["quiz"],
)
async def delete_session(session_id: str) -> Response:
    if not quiz_manager.discard(session_id):
        raise HTTPException(status_code=404, detail="Session not found")
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post(f"{_PREFIX}/{{session_id}}/answer", response_model=ActionResponse, tags=["quiz"])
async def answer(session_id: str, req: AnswerRequest) -> ActionResponse:
    return _act(session_id, lambda s: s.select_answer(req.key) is not None)


@router.post(f"{_PREFIX}/{{session_id}}/advance", response_model=ActionResponse, tags=["quiz"])
async def advance(session_id: str) -> ActionResponse:
    return _act(session_id, lambda s: s.advance_now())


@router.post(f"{_PREFIX}/{{session_id}}/next", response_model=ActionResponse, tags=["quiz"])
async def next_question(session_id: str) -> ActionResponse:
    return _act(session_id, lambda s: s.next_question())


@router.post(f"{_PREFIX}/{{session_id}}/previous", response_model=ActionResponse, tags=["quiz"])
async def previous_question(session_id: str) -> ActionResponse:
    return _act(session_id, lambda s: s.previous_question())


@router.post(f"{_PREFIX}/{{session_id}}/skip", response_model=ActionResponse, tags=["quiz"])
async def skip_to_results(session_id: str) -> ActionResponse:
    return _act(session_id, lambda s: s.skip_to_results())


@router.post(f"{_PREFIX}/{{session_id}}/reset", response_model=ActionResponse, tags=["quiz"])
async def reset(session_id: str) -> ActionResponse:
    return _act(session_id, lambda s: s.reset())


@router.post(
    f"{_PREFIX}/{{session_id}}/review/enter", response_model=ActionResponse, tags=["quiz"]
)
async def enter_review(session_id: str) -> ActionResponse:
    return _act(session_id, lambda s: s.enter_review())


@router.post(
    f"{_PREFIX}/{{session_id}}/review/exit", response_model=ActionResponse, tags=["quiz"]
)
async def exit_review(session_id: str) -> ActionResponse:
    return _act(session_id, lambda s: s.exit_review())


@router.post(
    f"{_PREFIX}/{{session_id}}/review/next", response_model=ActionResponse, tags=["quiz"]
)
async def next_review(session_id: str) -> ActionResponse:
    return _act(session_id, lambda s: s.next_review())


@router.post(
    f"{_PREFIX}/{{session_id}}/review/previous",
    response_model=ActionResponse,
    tags=["quiz"],
)
async def previous_review(session_id: str) -> ActionResponse:
    return _act(session_id, lambda s: s.previous_review())
