# services/quiz/routers/sessions.py
from __future__ import annotations

import uuid
from typing import Any, Dict, Optional

from fastapi import APIRouter, HTTPException
from sqlalchemy.orm import Session
from sqlalchemy.orm.exc import StaleDataError

from bank import get_templates, load_error
from db import SessionLocal
from models import Attempt, QuizSession
from quiz import QuizDriver, QuizState
from schemas.sessions import (
    RevealResponse,
    SessionCreate,
    SessionOut,
    SubmitRequest,
    SubmitResponse,
)

router = APIRouter(prefix="/sessions", tags=["sessions"])

_NO_QUESTION_MSG = "No question available for this dataset."


def _notice(driver: QuizDriver) -> Optional[str]:
    if driver.state.question is not None:
        return None
    err = load_error(driver.state.variant)
    if err:
        return f"Could not load question templates: {err}"
    return _NO_QUESTION_MSG


def _view(session_id: str, driver: QuizDriver) -> Dict[str, Any]:
    s = driver.state
    return {
        "id": session_id,
        "variant": s.variant,
        "dataset": s.dataset,
        "narration": s.narration,
        "question": s.question,
        "question_type": s.question_type,
        "submitted": s.submitted,
        "score": {"correct": s.correct_count, "total": s.total_attempts},
        "total_elapsed_seconds": driver.total_elapsed(),
        "notice": _notice(driver),
    }


def _load(db: Session, session_id: str) -> tuple[QuizSession, QuizDriver]:
    row = db.get(QuizSession, session_id)
    if not row:
        raise HTTPException(status_code=404, detail="Session not found")
    state = QuizState.model_validate(row.state)
    return row, QuizDriver(state, get_templates(state.variant))


def _save(row: QuizSession, driver: QuizDriver) -> None:
    # assign a fresh dict so the JSON column is flagged dirty
    row.state = driver.state.model_dump(mode="json")


def _commit(db: Session) -> bool:
    """Commit, or roll back and return False if another request wrote the session first."""
    try:
        db.commit()
    except StaleDataError:
        db.rollback()
        return False
    return True


def _conflict() -> HTTPException:
    return HTTPException(status_code=409, detail="Session was changed by another request")


def _not_graded(driver: QuizDriver) -> Dict[str, Any]:
    s = driver.state
    return {
        "ok": False,
        "correct": False,
        "feedback": "already submitted" if s.submitted else "no question to answer",
        "score": {"correct": s.correct_count, "total": s.total_attempts},
        "total_elapsed_seconds": driver.total_elapsed(),
    }


@router.post("", response_model=SessionOut)
def create_session(req: SessionCreate):
    driver = QuizDriver.start(req.variant, get_templates(req.variant))
    session_id = str(uuid.uuid4())

    with SessionLocal() as db:
        db.add(
            QuizSession(
                id=session_id,
                variant=req.variant.value,
                state=driver.state.model_dump(mode="json"),
            )
        )
        db.commit()

    return _view(session_id, driver)


@router.get("/{session_id}", response_model=SessionOut)
def get_session(session_id: str):
    with SessionLocal() as db:
        _, driver = _load(db, session_id)
    return _view(session_id, driver)


@router.post("/{session_id}/question", response_model=SessionOut)
def new_question(session_id: str):
    with SessionLocal() as db:
        row, driver = _load(db, session_id)
        driver.new_question()
        _save(row, driver)
        if not _commit(db):
            raise _conflict()
    return _view(session_id, driver)


@router.post("/{session_id}/randomize", response_model=SessionOut)
def randomize(session_id: str):
    with SessionLocal() as db:
        row, driver = _load(db, session_id)
        driver.randomize()
        _save(row, driver)
        if not _commit(db):
            raise _conflict()
    return _view(session_id, driver)


@router.post("/{session_id}/reveal", response_model=RevealResponse)
def reveal(session_id: str):
    with SessionLocal() as db:
        _, driver = _load(db, session_id)
    answer = driver.reveal()
    return {"ok": answer is not None, "answer": answer}


@router.post("/{session_id}/submit", response_model=SubmitResponse)
def submit(session_id: str, req: SubmitRequest):
    with SessionLocal() as db:
        row, driver = _load(db, session_id)
        s = driver.state
        result = driver.submit(req.answer)

        if result is None:
            return _not_graded(driver)

        attempt = Attempt(
            session_id=session_id,
            question_type=s.question_type or "",
            question=s.question or "",
            expected=None if s.answer is None else str(s.answer),
            answer=req.answer,
            correct=result.correct,
            duration_ms=(
                None
                if result.last_elapsed_seconds is None
                else int(round(result.last_elapsed_seconds * 1000))
            ),
        )
        db.add(attempt)
        _save(row, driver)
        if not _commit(db):
            # an overlapping submit graded this question first
            _, driver = _load(db, session_id)
            return _not_graded(driver)
        db.refresh(attempt)

        return {
            "ok": True,
            "correct": result.correct,
            "feedback": result.feedback,
            "expected": result.expected,
            "score": {"correct": result.correct_count, "total": result.total_attempts},
            "last_elapsed_seconds": result.last_elapsed_seconds,
            "total_elapsed_seconds": result.total_elapsed_seconds,
            "attempt_id": attempt.id,
        }
