from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field
from quizmaker.utils.time_utils import get_local_time

class Category(BaseModel):
    id: int
    name: str
    description: Optional[str] = None
    is_active: bool = True
    created_at: datetime = Field(default_factory=get_local_time)

    def __repr__(self):
        return f"<Category(id={self.id}, name={self.name})>"
