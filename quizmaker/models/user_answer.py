from typing import List, Optional
from pydantic import BaseModel

class UserAnswer(BaseModel):
    id: int = 0
    attempt_id: int = 0
    question_id: int
    selected_option_ids: Optional[str] = None  # comma-joined option ids
    text_answer: Optional[str] = None
    is_correct: bool = False
    points_awarded: int = 0
    pending_review: bool = False

    @property
    def selected_ids(self) -> List[str]:
        if not self.selected_option_ids:
            return []
        return [part.strip() for part in self.selected_option_ids.split(",") if part.strip()]

    def __repr__(self):
        return f"<UserAnswer(id={self.id}, attempt_id={self.attempt_id}, question_id={self.question_id}, correct={self.is_correct})>"
