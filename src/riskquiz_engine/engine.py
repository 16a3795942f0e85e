"""QuizSession — the orchestrator for the adaptive screening quiz.

Composes the branching resolver, candidate detector, phase controller and
scorer into one state machine.  It is the only component the presentation
layer talks to.

Flow overview:
    general      — every general question, following branch rules
    specialized  — one question set per detected candidate, FIFO order
    done         — answers persisted, score and tier computed (skipped on
                   the healthy / no-specific-condition terminals)

State is an immutable ``SessionState``; each call returns the new state and
the session keeps a reference to the latest one.  Calls are serialized by an
``asyncio.Lock`` so a submission runs to completion (including awaits on the
response store and tier lookup) before the next is accepted.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Optional

from riskquiz_engine.branching import BranchingResolver
from riskquiz_engine.constants import GENERAL_CATEGORY, PHASE_NAMES
from riskquiz_engine.controller import PhaseController
from riskquiz_engine.detector import CandidateDetector
from riskquiz_engine.errors import (
    AuthenticationRequired,
    FetchFailure,
    NoTierMatch,
    PersistenceFailure,
    QuizError,
)
from riskquiz_engine.interfaces import (
    IdentityProvider,
    QuestionRepository,
    QuizCallbacks,
    ResponseStore,
    RiskTierLookup,
)
from riskquiz_engine.models.question import (
    Question,
    RangeQuestion,
    SelectQuestion,
    format_response,
)
from riskquiz_engine.models.session import (
    AnswerValue,
    CompletionStep,
    QuestionPayload,
    QuestionStep,
    QuizOutcome,
    QuizPhase,
    QuizResult,
    SessionState,
    StepResult,
)
from riskquiz_engine.models.tier import RiskTier
from riskquiz_engine.scorer import Scorer, ScoreResult

logger = logging.getLogger(__name__)


class QuizSession:
    """Orchestrates one user's quiz attempt.

    Args:
        questions: source of the general and specialized question partitions
        responses: durable answer log written on completion
        tiers: score → risk tier lookup
        identity: supplies the authenticated user id at completion time
        callbacks: optional presentation hooks
    """

    def __init__(
        self,
        questions: QuestionRepository,
        responses: ResponseStore,
        tiers: RiskTierLookup,
        identity: IdentityProvider,
        callbacks: QuizCallbacks | None = None,
    ) -> None:
        self._questions = questions
        self._responses = responses
        self._tiers = tiers
        self._identity = identity
        self._callbacks = callbacks or QuizCallbacks()

        self._resolver = BranchingResolver()
        self._detector = CandidateDetector()
        self._controller = PhaseController()
        self._scorer = Scorer()

        # Populated by start(); read-only afterwards
        self._general: tuple[Question, ...] = ()
        self._specialized: tuple[Question, ...] = ()
        self._state: SessionState | None = None
        self._lock = asyncio.Lock()

    # ==================================================================
    # Accessors
    # ==================================================================

    @property
    def started(self) -> bool:
        return self._state is not None

    @property
    def state(self) -> SessionState:
        """Latest state.  Raises ValueError before :meth:`start`."""
        if self._state is None:
            raise ValueError("Quiz not started: call start() first")
        return self._state

    @property
    def callbacks(self) -> QuizCallbacks:
        return self._callbacks

    @callbacks.setter
    def callbacks(self, callbacks: QuizCallbacks) -> None:
        self._callbacks = callbacks

    # ==================================================================
    # Lifecycle
    # ==================================================================

    async def start(self) -> SessionState:
        """Load both question partitions and enter the general phase.

        Raises:
            FetchFailure: the repository failed, returned malformed rows, or
                has no general questions.
        """
        async with self._lock:
            try:
                general = await self._questions.fetch_general_questions()
                specialized = await self._questions.fetch_specialized_questions()
            except FetchFailure as exc:
                self._surface(exc)
                raise
            except Exception as exc:
                error = FetchFailure(f"Failed to fetch quiz questions: {exc}")
                self._surface(error)
                raise error from exc

            if not general:
                error = FetchFailure("No general questions found; please try again later")
                self._surface(error)
                raise error

            self._general = tuple(general)
            self._specialized = tuple(specialized)
            self._state = self._controller.initial_state(self._general)
            logger.info(
                "Quiz started: %d general, %d specialized questions",
                len(self._general),
                len(self._specialized),
            )
            return self._state

    async def reset(self) -> SessionState:
        """Return to the first general question without re-fetching questions."""
        async with self._lock:
            if self._state is None:
                raise ValueError("Quiz not started: call start() first")
            self._state = self._controller.initial_state(self._general)
            return self._state

    # ==================================================================
    # Answer submission
    # ==================================================================

    async def submit_answer(
        self, question_id: int | None, value: AnswerValue
    ) -> SessionState:
        """Record an answer for the current question and advance.

        ``question_id`` may be ``None``, in which case the current question
        is assumed.  A later answer for the same id overwrites the earlier.

        Raises:
            ValueError: the quiz is not started, already completed, or
                ``question_id`` is not the current question.
            AuthenticationRequired: completion needs an identity; the answer
                stays recorded and resubmitting retries completion.
        """
        async with self._lock:
            state = self.state
            if state.completed:
                raise ValueError("Quiz already completed: reset to start again")

            question = state.current_question
            if question_id is None:
                question_id = question.id
            elif question_id != question.id:
                raise ValueError(
                    f"Question {question_id} is not the current question ({question.id})"
                )

            answers = {**state.answers, question_id: value}
            answered = state.model_copy(update={"answers": answers})
            self._callbacks.on_answer_submitted(question_id, value)

            next_index = self._resolver.resolve_next(
                question, value, state.active_question_set, state.current_index,
            )
            if next_index is not None:
                self._state = self._controller.move_to(answered, next_index)
                return self._state

            # End of the active set: hand over to the phase controller
            if state.phase == QuizPhase.GENERAL:
                detection = self._detector.detect(answers, self._general)
                advanced = self._controller.finish_general(
                    answered, detection, self._specialized,
                )
            else:
                advanced = self._controller.finish_specialized(answered, self._specialized)

            if advanced.phase != QuizPhase.DONE:
                self._callbacks.on_candidate_started(
                    advanced.active_candidate, list(advanced.candidate_queue),
                )
                self._state = advanced
                return advanced

            try:
                self._state = await self._complete(advanced)
            except AuthenticationRequired:
                self._state = answered
                raise
            return self._state

    # ==================================================================
    # Rendering
    # ==================================================================

    def current_step(self) -> StepResult:
        """Render the latest state as a question or completion step."""
        state = self.state
        if state.completed:
            return CompletionStep(result=self.build_result(state))

        question = state.current_question
        return QuestionStep(
            phase=state.phase,
            phase_name=self._phase_name(state),
            candidate=state.active_candidate if state.phase == QuizPhase.SPECIALIZED else None,
            position=state.current_index + 1,
            total=len(state.active_question_set),
            question=self._question_to_payload(question),
        )

    def build_result(self, state: SessionState) -> QuizResult:
        """Completion payload for a completed state."""
        percentage = None
        if state.score is not None and state.max_score is not None:
            percentage = ScoreResult(state.score, state.max_score).percentage
        return QuizResult(
            outcome=state.outcome,
            score=state.score,
            max_score=state.max_score,
            percentage=percentage,
            tier=state.result_tier,
            detected_candidates=list(state.detected_candidates),
            primary_candidate=self._primary_candidate(state),
        )

    # ==================================================================
    # Internal: completion
    # ==================================================================

    async def _complete(self, state: SessionState) -> SessionState:
        """Persist, score and look up the tier for a state entering done."""
        user_id = await self._identity.current_user_id()
        if not user_id:
            error = AuthenticationRequired("You need to be logged in to save quiz results")
            self._surface(error)
            raise error

        try:
            await self._persist(user_id, state.answers)
        except PersistenceFailure as exc:
            self._surface(exc)

        if state.outcome == QuizOutcome.ASSESSED:
            scoring_set = self._controller.scoring_questions(
                state, self._general, self._specialized,
            )
            scored = self._scorer.evaluate(state.answers, scoring_set)
            tier = await self._lookup_tier(scored.score, state)
            state = state.model_copy(update={
                "score": scored.score,
                "max_score": scored.max_score,
                "result_tier": tier,
            })

        state = state.model_copy(update={"completed": True})
        result = self.build_result(state)
        logger.info(
            "Quiz completed: outcome=%s, score=%s, candidates=%s",
            result.outcome.value, result.score, result.detected_candidates,
        )
        self._callbacks.on_quiz_complete(result)
        return state

    async def _persist(self, user_id: str, answers: dict[int, AnswerValue]) -> None:
        """Write answers one at a time; stop at the first failure.

        Already-written answers are not retried or rolled back.
        """
        written: list[int] = []
        for question_id, value in answers.items():
            try:
                await self._responses.record_response(
                    user_id, question_id, format_response(value),
                )
            except Exception as exc:
                raise PersistenceFailure(
                    f"Failed to save your responses "
                    f"({len(written)} of {len(answers)} saved): {exc}",
                    written=written,
                    failed_question_id=question_id,
                ) from exc
            written.append(question_id)
        logger.info("Saved %d responses for user %s", len(written), user_id)

    async def _lookup_tier(self, score: int, state: SessionState) -> Optional[RiskTier]:
        """Fetch the tier for ``score``; lookup problems are surfaced, not raised."""
        condition = self._primary_candidate(state)
        try:
            tier = await self._tiers.find_tier(score, condition)
        except Exception as exc:
            self._surface(FetchFailure(f"Failed to determine your risk assessment: {exc}"))
            return None

        if tier is None:
            scope = f" for '{condition}'" if condition else ""
            self._surface(NoTierMatch(f"No risk tier covers score {score}{scope}"))
        return tier

    # ==================================================================
    # Internal: helpers
    # ==================================================================

    def _surface(self, error: QuizError) -> None:
        """Log a user-facing error and forward it to ``on_error``."""
        logger.error("%s: %s", error.kind, error)
        self._callbacks.on_error(error.kind, str(error))

    @staticmethod
    def _primary_candidate(state: SessionState) -> Optional[str]:
        """First detected candidate, unless it is the general sentinel."""
        if state.detected_candidates and state.detected_candidates[0] != GENERAL_CATEGORY:
            return state.detected_candidates[0]
        return None

    @staticmethod
    def _phase_name(state: SessionState) -> str:
        template = PHASE_NAMES[state.phase.value]
        candidate = (state.active_candidate or "").capitalize()
        return template.format(candidate=candidate)

    @staticmethod
    def _question_to_payload(question: Question) -> QuestionPayload:
        """Convert a typed Question into the flat payload the UI renders."""
        payload = QuestionPayload(
            id=question.id,
            text=question.text,
            type=question.type,
            category=question.category,
        )
        if isinstance(question, SelectQuestion):
            payload.choices = list(question.choices)
        elif isinstance(question, RangeQuestion):
            payload.constraints = {
                "min": question.options.min,
                "max": question.options.max,
                "step": question.options.step,
            }
        return payload
