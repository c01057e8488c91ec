# services/quiz/schemas/grading.py
from __future__ import annotations

from typing import Optional, Union

from pydantic import BaseModel


class GradeRequest(BaseModel):
    answer: str
    expected: Union[int, float, str]


class GradeResponse(BaseModel):
    ok: bool
    correct: bool
    # canonical forms actually compared
    normalized_answer: Optional[str] = None
    normalized_expected: Optional[str] = None
