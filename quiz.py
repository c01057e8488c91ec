from __future__ import annotations

import logging
import random
import time
from typing import Callable, List, Optional, Sequence, Union

from pydantic import BaseModel

from answer_engine import Answer, AnswerEngine, GeneratedQuestion
from bank import TemplateModel, Variant
from data_model import PeriodData, PeriodDataset, TableData, TableDataset
from grader import is_correct
from narration import narrate

logger = logging.getLogger(__name__)

CORRECT_FEEDBACK = "Correct."
WRONG_FEEDBACK = "Wrong"


class QuizState(BaseModel):
    """Everything one quiz session remembers between user actions."""

    variant: Variant
    dataset: Optional[Union[PeriodDataset, TableDataset]] = None
    narration: List[str] = []
    question: Optional[str] = None
    question_type: Optional[str] = None
    answer: Optional[Answer] = None
    submitted: bool = False
    correct_count: int = 0
    total_attempts: int = 0
    started_at: float
    last_submit_at: Optional[float] = None


class SubmitResult(BaseModel):
    correct: bool
    feedback: str
    expected: Optional[Answer] = None
    correct_count: int
    total_attempts: int
    # None on the first submission of a session
    last_elapsed_seconds: Optional[float] = None
    total_elapsed_seconds: float


class QuizDriver:
    """Runs the user commands against a QuizState it owns for the duration of a call."""

    def __init__(
        self,
        state: QuizState,
        templates: Sequence[TemplateModel],
        rng: Optional[random.Random] = None,
        clock: Callable[[], float] = time.time,
    ):
        self.state = state
        self.templates = templates
        self.rng = rng or random.Random()
        self.clock = clock

    @classmethod
    def start(
        cls,
        variant: Variant,
        templates: Sequence[TemplateModel],
        rng: Optional[random.Random] = None,
        clock: Callable[[], float] = time.time,
    ) -> "QuizDriver":
        state = QuizState(variant=Variant(variant), started_at=clock())
        driver = cls(state, templates, rng=rng, clock=clock)
        driver.randomize()
        return driver

    def _data(self) -> Union[PeriodData, TableData]:
        if self.state.variant == Variant.TABLE:
            return TableData(self.state.dataset)
        return PeriodData(self.state.dataset)

    def randomize(self) -> Optional[GeneratedQuestion]:
        """Replace the dataset, then ask a fresh question about it."""
        dataset = self._data().randomize(self.rng)
        self.state.dataset = dataset
        self.state.narration = (
            narrate(dataset, self.rng) if isinstance(dataset, PeriodDataset) else []
        )
        # the old question was about the old dataset
        self.state.question = self.state.question_type = self.state.answer = None
        return self.new_question()

    def new_question(self) -> Optional[GeneratedQuestion]:
        generated = AnswerEngine(self._data(), self.rng).generate(self.templates)
        if generated is None:
            return None
        self.state.question = generated.question
        self.state.question_type = generated.type
        self.state.answer = generated.answer
        self.state.submitted = False
        return generated

    def reveal(self) -> Optional[Answer]:
        return self.state.answer

    def total_elapsed(self, now: Optional[float] = None) -> float:
        now = self.clock() if now is None else now
        return max(0.0, now - self.state.started_at)

    def submit(self, raw_answer: str) -> Optional[SubmitResult]:
        s = self.state
        if s.question is None or s.submitted:
            return None

        correct = is_correct(raw_answer, s.answer)
        s.total_attempts += 1
        if correct:
            s.correct_count += 1

        now = self.clock()
        last_elapsed = None
        if s.last_submit_at is not None:
            last_elapsed = max(0.0, now - s.last_submit_at)
        s.last_submit_at = now
        s.submitted = True

        logger.info(
            "Graded %s answer: %s (%d/%d)",
            s.question_type,
            "correct" if correct else "wrong",
            s.correct_count,
            s.total_attempts,
        )
        return SubmitResult(
            correct=correct,
            feedback=CORRECT_FEEDBACK if correct else WRONG_FEEDBACK,
            expected=s.answer,
            correct_count=s.correct_count,
            total_attempts=s.total_attempts,
            last_elapsed_seconds=last_elapsed,
            total_elapsed_seconds=self.total_elapsed(now),
        )
