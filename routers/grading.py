from __future__ import annotations

from fastapi import APIRouter

from grader import is_correct, normalize
from schemas.grading import GradeRequest, GradeResponse

router = APIRouter(tags=["grading"])


@router.post("/grade", response_model=GradeResponse)
def grade(req: GradeRequest):
    """Stateless check of a typed answer against a known expected answer."""
    has_percent = "%" in str(req.expected)
    return {
        "ok": True,
        "correct": is_correct(req.answer, req.expected),
        "normalized_answer": str(normalize(req.answer, has_percent)),
        "normalized_expected": str(normalize(req.expected, has_percent)),
    }
