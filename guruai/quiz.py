"""Quiz generation, payload validation and local scoring.

The model is asked for schema-constrained JSON, but the reply is still just
text until it parses and validates here.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Sequence

from pydantic import TypeAdapter, ValidationError

from . import prompts
from .errors import (
    GuruError,
    MalformedQuizError,
    QuizGenerationFailed,
    UserInputInvalid,
    ViewClosed,
)
from .lifecycle import ViewController
from .models import QuizQuestion, QuizStateResponse, Standard, Subject, UserProfile

logger = logging.getLogger(__name__)

QUIZ_LENGTH = 5

_questions_adapter = TypeAdapter(List[QuizQuestion])


def parse_quiz(raw_text: str) -> List[QuizQuestion]:
    cleaned = (raw_text or "").replace("```json", "").replace("```", "").strip()
    if not cleaned:
        raise MalformedQuizError("quiz payload is empty")
    try:
        questions = _questions_adapter.validate_json(cleaned)
    except ValidationError as e:
        raise MalformedQuizError(f"quiz payload failed validation ({e.error_count()} errors)") from e
    if len(questions) != QUIZ_LENGTH:
        raise MalformedQuizError(f"expected {QUIZ_LENGTH} questions, got {len(questions)}")
    return questions


def generate_quiz(provider, topic: str, standard: Standard, subject: Subject) -> List[QuizQuestion]:
    topic = (topic or "").strip()
    if not topic:
        raise UserInputInvalid("Topic is empty.")
    raw = provider.generate_structured(
        prompts.quiz_prompt(topic, standard, subject, count=QUIZ_LENGTH),
        prompts.QUIZ_RESPONSE_SCHEMA,
    )
    return parse_quiz(raw)


class QuestionState(str, Enum):
    AWAITING_ANSWER = "awaiting_answer"
    EXPLAINING = "explaining"


class SessionStatus(str, Enum):
    IN_PROGRESS = "in_progress"
    FINISHED = "finished"


@dataclass(frozen=True)
class AnswerOutcome:
    selected: int
    correct_answer: int
    is_correct: bool
    explanation: str


class QuizSession:
    def __init__(self, questions: Sequence[QuizQuestion]) -> None:
        if not questions:
            raise ValueError("a quiz session needs at least one question")
        self.questions = tuple(questions)
        self.reset()

    def reset(self) -> None:
        self.index = 0
        self.score = 0
        self.selections: List[Optional[int]] = [None] * len(self.questions)
        self.status = SessionStatus.IN_PROGRESS

    @property
    def total(self) -> int:
        return len(self.questions)

    @property
    def finished(self) -> bool:
        return self.status is SessionStatus.FINISHED

    @property
    def current_question(self) -> QuizQuestion:
        return self.questions[self.index]

    @property
    def selected_option(self) -> Optional[int]:
        return self.selections[self.index]

    @property
    def question_state(self) -> QuestionState:
        if self.selected_option is None:
            return QuestionState.AWAITING_ANSWER
        return QuestionState.EXPLAINING

    def select(self, option: int) -> Optional[AnswerOutcome]:
        """Lock in an answer for the active question; later selections are ignored."""
        if self.finished or self.selected_option is not None:
            return None
        question = self.current_question
        if not 0 <= option < len(question.options):
            raise UserInputInvalid(f"Option {option} does not exist.")

        self.selections[self.index] = option
        is_correct = option == question.correct_answer
        if is_correct:
            self.score += 1
        return AnswerOutcome(
            selected=option,
            correct_answer=question.correct_answer,
            is_correct=is_correct,
            explanation=question.explanation,
        )

    def advance(self) -> None:
        if self.finished:
            return
        if self.question_state is QuestionState.AWAITING_ANSWER:
            raise UserInputInvalid("Answer the current question before continuing.")
        if self.index < self.total - 1:
            self.index += 1
        else:
            self.status = SessionStatus.FINISHED


class QuizController(ViewController):
    view_name = "quiz"

    def __init__(self, provider, profile: UserProfile) -> None:
        super().__init__()
        self.provider = provider
        self.profile = profile
        self.topic: Optional[str] = None
        self.subject = Subject.MATHEMATICS
        self.session: Optional[QuizSession] = None

    async def start(self, topic: str, subject: Optional[Subject] = None) -> QuizSession:
        topic = (topic or "").strip()
        if not topic:
            raise UserInputInvalid("Topic is empty.")
        subject = Subject(subject) if subject is not None else self.subject
        self._ensure_ready()

        try:
            questions = await self._run(generate_quiz, self.provider, topic, self.profile.standard, subject)
        except ViewClosed:
            raise
        except GuruError as e:
            logger.error(f"Quiz Gen Error: {e}")
            raise QuizGenerationFailed(str(e)) from e

        self.topic = topic
        self.subject = subject
        self.session = QuizSession(questions)
        logger.info(f"Quiz ready: {len(questions)} questions on '{topic}' ({subject.value})")
        return self.session

    async def retake(self) -> QuizSession:
        if self.topic is None:
            raise UserInputInvalid("No quiz to retake.")
        return await self.start(self.topic, self.subject)

    def clear(self) -> None:
        self.session = None

    def _require_session(self) -> QuizSession:
        if self.session is None:
            raise UserInputInvalid("No quiz in progress.")
        return self.session

    def answer(self, option: int) -> Optional[AnswerOutcome]:
        return self._require_session().select(option)

    def advance(self) -> None:
        self._require_session().advance()

    def state(self) -> QuizStateResponse:
        session = self.session
        if session is None:
            return QuizStateResponse(topic=self.topic, subject=self.subject, busy=self.busy)
        selected = session.selected_option
        question = session.current_question
        return QuizStateResponse(
            topic=self.topic,
            subject=self.subject,
            status=session.status.value,
            question_state=session.question_state.value,
            question_index=session.index,
            total=session.total,
            score=session.score,
            question=question,
            selected_option=selected,
            is_correct=None if selected is None else selected == question.correct_answer,
            busy=self.busy,
        )

    def _on_close(self) -> None:
        self.session = None
