from datetime import datetime
from uuid import uuid4
from pydantic import BaseModel, Field
from quizmaker.utils.time_utils import get_local_time

ADMIN_ROLE = "Admin"
USER_ROLE = "User"

class User(BaseModel):
    id: str = Field(default_factory=lambda: str(uuid4()))
    email: str
    password_hash: str
    first_name: str = ""
    last_name: str = ""
    role: str = USER_ROLE
    created_at: datetime = Field(default_factory=get_local_time)

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    def __repr__(self):
        return f"<User(id={self.id}, email={self.email}, role={self.role})>"
