from datetime import datetime

from pydantic import BaseModel, ConfigDict


class AttemptOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    id: int
    created_at: datetime | None
    session_id: str | None = None
    question_type: str
    question: str
    expected: str | None = None
    # keep the raw answer optional; usually excluded in list views
    answer: str | None = None
    correct: bool
    duration_ms: int | None = None
