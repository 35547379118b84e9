from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field
from quizmaker.utils.time_utils import get_local_time

class QuizAttempt(BaseModel):
    id: int
    quiz_id: int
    user_id: str
    started_at: datetime = Field(default_factory=get_local_time)
    completed_at: Optional[datetime] = None
    score: int = 0
    max_score: int = 0

    @property
    def percentage(self) -> float:
        return self.score / self.max_score * 100 if self.max_score > 0 else 0.0

    @property
    def is_completed(self) -> bool:
        return self.completed_at is not None

    def __repr__(self):
        return f"<QuizAttempt(id={self.id}, quiz_id={self.quiz_id}, user_id={self.user_id}, score={self.score}/{self.max_score})>"
