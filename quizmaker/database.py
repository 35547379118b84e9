import logging
import os
from typing import Dict, List, Optional

from pydantic import BaseModel
from pydantic import ValidationError as SchemaError

from quizmaker.errors import NotFoundError, PersistenceError
from quizmaker.models import (
    Category, Question, QuestionOption, Quiz, QuizAttempt, User, UserAnswer,
)

# Table name -> model stored in it
TABLES = {
    "users": User,
    "categories": Category,
    "quizzes": Quiz,
    "questions": Question,
    "question_options": QuestionOption,
    "quiz_attempts": QuizAttempt,
    "user_answers": UserAnswer,
}

# Tables whose ids come from a monotonic counter
COUNTED_TABLES = ["quizzes", "questions", "question_options", "quiz_attempts", "user_answers"]


class StoreSnapshot(BaseModel):
    """On-disk shape of the data store"""

    users: List[User] = []
    categories: List[Category] = []
    quizzes: List[Quiz] = []
    questions: List[Question] = []
    question_options: List[QuestionOption] = []
    quiz_attempts: List[QuizAttempt] = []
    user_answers: List[UserAnswer] = []
    counters: Dict[str, int] = {}


class DataStore:
    """In-memory tables with monotonic id counters and JSON file persistence.

    Rows are pydantic models. Lookups go through ``select`` with equality
    filters or the ``get_*`` helpers; rows never hold references to each other
    beyond ids.
    """

    def __init__(self, data_file: Optional[str] = None, autosave: bool = False):
        self.data_file = data_file
        self.autosave = autosave
        self.tables: Dict[str, list] = {name: [] for name in TABLES}
        self.counters: Dict[str, int] = {name: 1 for name in COUNTED_TABLES}

    # Generic table operations

    def _table(self, table: str) -> list:
        if table not in self.tables:
            raise KeyError(f"Unknown table: {table}")
        return self.tables[table]

    def next_id(self, table: str) -> int:
        """Hand out the next id for a counted table"""
        value = self.counters[table]
        self.counters[table] = value + 1
        return value

    def insert(self, table: str, row):
        """Insert a row, assigning an id from the counter when it has none"""
        rows = self._table(table)
        if table in self.counters:
            if not row.id:
                row.id = self.next_id(table)
            elif row.id >= self.counters[table]:
                self.counters[table] = row.id + 1
        rows.append(row)
        return row

    def select(self, table: str, filters: dict = None, limit: int = None) -> list:
        """Select rows whose attributes equal every filter value"""
        rows = self._table(table)
        result = []
        for row in rows:
            if filters and any(getattr(row, key) != value for key, value in filters.items()):
                continue
            result.append(row)
            if limit and len(result) >= limit:
                break
        return result

    def update(self, table: str, data: dict, filters: dict) -> list:
        """Update every row matching the filters, returning the updated rows"""
        updated = self.select(table, filters)
        for row in updated:
            for key, value in data.items():
                setattr(row, key, value)
        return updated

    def delete(self, table: str, filters: dict) -> list:
        """Delete every row matching the filters, returning the deleted rows"""
        doomed = self.select(table, filters)
        if doomed:
            doomed_ids = {id(row) for row in doomed}
            self.tables[table] = [row for row in self._table(table) if id(row) not in doomed_ids]
        return doomed

    def upsert(self, table: str, row):
        """Replace the row with the same id, or insert it"""
        rows = self._table(table)
        for index, existing in enumerate(rows):
            if existing.id == row.id:
                rows[index] = row
                return row
        return self.insert(table, row)

    def count(self, table: str, filters: dict = None) -> int:
        return len(self.select(table, filters))

    # Id lookups

    def _get(self, table: str, row_id, label: str):
        rows = self.select(table, {"id": row_id}, limit=1)
        if not rows:
            raise NotFoundError(f"{label} not found")
        return rows[0]

    def get_user(self, user_id: str) -> User:
        return self._get("users", user_id, "User")

    def get_quiz(self, quiz_id: int) -> Quiz:
        return self._get("quizzes", quiz_id, "Quiz")

    def get_attempt(self, attempt_id: int) -> QuizAttempt:
        return self._get("quiz_attempts", attempt_id, "Quiz attempt")

    def get_category(self, category_id: int) -> Category:
        return self._get("categories", category_id, "Category")

    def find_user_by_email(self, email: str) -> Optional[User]:
        wanted = (email or "").strip().lower()
        for user in self.tables["users"]:
            if user.email.lower() == wanted:
                return user
        return None

    def questions_for(self, quiz_id: int) -> List[Question]:
        return sorted(self.select("questions", {"quiz_id": quiz_id}), key=lambda q: q.order_index)

    def options_for(self, question_id: int) -> List[QuestionOption]:
        return sorted(self.select("question_options", {"question_id": question_id}), key=lambda o: o.order_index)

    def answers_for(self, attempt_id: int) -> List[UserAnswer]:
        return self.select("user_answers", {"attempt_id": attempt_id})

    def is_empty(self) -> bool:
        return not self.tables["quizzes"] or not self.tables["questions"]

    # Persistence

    def snapshot(self) -> StoreSnapshot:
        # Incomplete attempts and their answers are not persisted
        completed = [a for a in self.tables["quiz_attempts"] if a.is_completed]
        completed_ids = {a.id for a in completed}
        data = {name: list(rows) for name, rows in self.tables.items()}
        data["quiz_attempts"] = completed
        data["user_answers"] = [a for a in self.tables["user_answers"] if a.attempt_id in completed_ids]
        return StoreSnapshot(counters=dict(self.counters), **data)

    def save(self, path: Optional[str] = None) -> None:
        """Write the store to disk as JSON"""
        path = path or self.data_file
        if not path:
            raise PersistenceError("No data file configured")
        try:
            payload = self.snapshot().model_dump_json(indent=2)
            tmp_path = f"{path}.tmp"
            with open(tmp_path, "w", encoding="utf-8") as f:
                f.write(payload)
            os.replace(tmp_path, path)
            logging.info(f"Saved data store to {path}")
        except OSError as e:
            logging.error(f"Save error for {path}: {e}")
            raise PersistenceError(f"Failed to save data: {e}")

    def commit(self) -> bool:
        """Save after a mutation when autosave is on; failures are logged, not raised"""
        if not self.autosave or not self.data_file:
            return False
        try:
            self.save()
            return True
        except PersistenceError as e:
            logging.error(f"Continuing with in-memory data: {e.detail}")
            return False

    def load(self, path: Optional[str] = None) -> bool:
        """Load a JSON snapshot, upserting rows by id.

        Returns False when there is no file to load. Raises PersistenceError on
        an unreadable or malformed file; the store is left unchanged then.
        """
        path = path or self.data_file
        if not path or not os.path.exists(path):
            logging.info(f"No existing data file found at {path}")
            return False
        try:
            with open(path, "r", encoding="utf-8") as f:
                snapshot = StoreSnapshot.model_validate_json(f.read())
        except (OSError, SchemaError, ValueError) as e:
            logging.error(f"Load error for {path}: {e}")
            raise PersistenceError(f"Failed to load data: {e}")

        for table in TABLES:
            for row in getattr(snapshot, table):
                self.upsert(table, row)
        for table, value in snapshot.counters.items():
            if table in self.counters:
                self.counters[table] = max(self.counters[table], value)

        logging.info(
            f"Loaded {len(self.tables['users'])} users, "
            f"{len(self.tables['quizzes'])} quizzes, "
            f"{len(self.tables['quiz_attempts'])} quiz attempts from {path}"
        )
        return True
