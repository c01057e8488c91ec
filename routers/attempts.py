# services/quiz/routers/attempts.py

from fastapi import APIRouter, Depends, HTTPException

from db import SessionLocal
from deps.auth import require_client
from models import Attempt
from schemas.attempts import AttemptOut

router = APIRouter(prefix="/attempts", tags=["attempts"])


@router.get("/recent-list", dependencies=[Depends(require_client)])
def attempts_recent(limit: int = 20, session_id: str | None = None):
    limit = max(1, min(limit, 100))

    with SessionLocal() as db:
        q = db.query(Attempt)
        if session_id:
            q = q.filter(Attempt.session_id == session_id)
        items = q.order_by(Attempt.created_at.desc(), Attempt.id.desc()).limit(limit).all()

    # Reuse schema; leave out the raw typed answers
    rows = [AttemptOut.model_validate(a).model_dump(exclude={"answer"}) for a in items]
    return {"ok": True, "items": rows, "count": len(rows)}


@router.get("/{attempt_id}", response_model=AttemptOut)
def get_attempt(attempt_id: int):
    # Public endpoint: no token required
    with SessionLocal() as db:
        a = db.get(Attempt, attempt_id)
        if not a:
            raise HTTPException(status_code=404, detail="Attempt not found")
        return AttemptOut.model_validate(a)
