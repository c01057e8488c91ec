# services/quiz/schemas/sessions.py
from __future__ import annotations

from typing import List, Optional, Union

from pydantic import BaseModel

from bank import Variant
from data_model import PeriodDataset, TableDataset

# ---------- Session view ----------


class SessionCreate(BaseModel):
    variant: Variant = Variant.NARRATION


class Score(BaseModel):
    correct: int
    total: int


class SessionOut(BaseModel):
    id: str
    variant: Variant
    dataset: Optional[Union[PeriodDataset, TableDataset]] = None
    # narrative sentences; empty for the table variant
    narration: List[str] = []
    question: Optional[str] = None
    question_type: Optional[str] = None
    submitted: bool
    score: Score
    total_elapsed_seconds: float
    # set when no question could be generated (e.g. templates failed to load)
    notice: Optional[str] = None


# ---------- Commands ----------


class RevealResponse(BaseModel):
    ok: bool
    answer: Optional[Union[int, str]] = None


class SubmitRequest(BaseModel):
    answer: str


class SubmitResponse(BaseModel):
    ok: bool
    correct: bool
    feedback: str
    expected: Optional[Union[int, str]] = None
    score: Score
    last_elapsed_seconds: Optional[float] = None
    total_elapsed_seconds: float
    attempt_id: Optional[int] = None
