from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field
from quizmaker.utils.time_utils import get_local_time

class Quiz(BaseModel):
    id: int
    title: str
    description: Optional[str] = None
    category_id: int
    created_by_id: str
    is_public: bool = True
    is_active: bool = True
    time_limit: int = 0  # In minutes, 0 means no limit
    created_at: datetime = Field(default_factory=get_local_time)

    def __repr__(self):
        return f"<Quiz(id={self.id}, title={self.title}, time_limit={self.time_limit})>"
