"""Quiz endpoints — start, inspect, answer, reset and discard a quiz.

A quiz lives in the server's in-memory registry under a client-chosen
``session_id``.  Identity comes from the optional ``X-User-ID`` header and
is only required when the final answer triggers persistence.

Every response carries the current step plus any notifications the engine
raised while handling the request.
"""

from typing import Annotated, Union

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from riskquiz_engine.errors import AuthenticationRequired, FetchFailure
from riskquiz_engine.models.session import CompletionStep, QuestionStep

from riskquiz_server.dependencies import get_registry, get_user_id
from riskquiz_server.registry import Notification, QuizEntry, QuizRegistry

router = APIRouter(prefix="/quiz", tags=["quiz"])


# ------------------------------------------------------------------
# Request / response models
# ------------------------------------------------------------------

class CreateQuizRequest(BaseModel):
    """Body for POST /quiz/sessions."""
    session_id: str = Field(min_length=1, max_length=128)


class AnswerRequest(BaseModel):
    """Body for POST /quiz/sessions/{session_id}/answers.

    ``question_id`` defaults to the current question when omitted.
    """
    question_id: int | None = None
    value: Union[str, int, float]


class StepResponse(BaseModel):
    """Current step for a quiz plus notifications raised by this request."""
    session_id: str
    step: Annotated[Union[QuestionStep, CompletionStep], Field(discriminator="type")]
    notifications: list[Notification] = Field(default_factory=list)


def _respond(session_id: str, entry: QuizEntry) -> StepResponse:
    return StepResponse(
        session_id=session_id,
        step=entry.quiz.current_step(),
        notifications=entry.callbacks.drain(),
    )


# ------------------------------------------------------------------
# Endpoints
# ------------------------------------------------------------------

@router.post("/sessions", status_code=201)
async def create_quiz(
    body: CreateQuizRequest,
    user_id: str | None = Depends(get_user_id),
    registry: QuizRegistry = Depends(get_registry),
) -> StepResponse:
    """Start a new quiz and return its first question.

    Raises 409 if the session id is already live and 503 if the questions
    cannot be loaded (the session id stays free for a retry).
    """
    entry = registry.create(body.session_id)
    entry.identity.user_id = user_id
    try:
        await entry.quiz.start()
    except FetchFailure:
        registry.remove(body.session_id)
        raise
    return _respond(body.session_id, entry)


@router.get("/sessions/{session_id}")
async def get_quiz(
    session_id: str,
    registry: QuizRegistry = Depends(get_registry),
) -> StepResponse:
    """Return the current step.  Raises 404 for an unknown session."""
    return _respond(session_id, registry.get(session_id))


@router.post("/sessions/{session_id}/answers")
async def submit_answer(
    session_id: str,
    body: AnswerRequest,
    user_id: str | None = Depends(get_user_id),
    registry: QuizRegistry = Depends(get_registry),
) -> StepResponse:
    """Answer the current question and return the next step.

    Raises 401 when the last answer needs a signed-in user to save results;
    the answer is kept, so the client can sign in and resubmit.
    """
    entry = registry.get(session_id)
    entry.identity.user_id = user_id
    try:
        await entry.quiz.submit_answer(body.question_id, body.value)
    except AuthenticationRequired:
        # The 401 body already carries the message
        entry.callbacks.drain()
        raise
    return _respond(session_id, entry)


@router.post("/sessions/{session_id}/reset")
async def reset_quiz(
    session_id: str,
    registry: QuizRegistry = Depends(get_registry),
) -> StepResponse:
    """Restart at the first general question, reusing the loaded questions."""
    entry = registry.get(session_id)
    await entry.quiz.reset()
    entry.callbacks.reset()
    return _respond(session_id, entry)


@router.delete("/sessions/{session_id}", status_code=204)
async def discard_quiz(
    session_id: str,
    registry: QuizRegistry = Depends(get_registry),
) -> None:
    """Discard a quiz; nothing is persisted for an unfinished attempt."""
    registry.remove(session_id)
