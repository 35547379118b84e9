"""
Unit tests for the data store
"""
import json
import pytest
from unittest.mock import patch
from quizmaker.database import DataStore
from quizmaker.errors import NotFoundError, PersistenceError
from quizmaker.models import Category, Quiz, QuizAttempt, User, UserAnswer
from quizmaker.utils.time_utils import get_local_time


def make_quiz(quiz_id=0, **overrides):
    data = {"id": quiz_id, "title": f"Quiz {quiz_id}", "category_id": 1, "created_by_id": "admin"}
    data.update(overrides)
    return Quiz(**data)


class TestDataStore:
    """Test cases for DataStore table operations"""

    def test_insert_assigns_counter_ids(self, store):
        """Rows without an id get the next counter value"""
        first = store.insert("quizzes", make_quiz())
        second = store.insert("quizzes", make_quiz())
        assert (first.id, second.id) == (1, 2)

    def test_insert_with_explicit_id_moves_counter(self, store):
        store.insert("quizzes", make_quiz(7))
        assert store.next_id("quizzes") == 8

    def test_select_with_filters(self, store):
        store.insert("quizzes", make_quiz(1, is_public=True))
        store.insert("quizzes", make_quiz(2, is_public=False))
        store.insert("quizzes", make_quiz(3, is_public=True, is_active=False))

        result = store.select("quizzes", {"is_public": True, "is_active": True})
        assert [q.id for q in result] == [1]

    def test_select_no_results(self, store):
        assert store.select("quizzes", {"id": 99}) == []

    def test_select_limit(self, store):
        for i in range(1, 4):
            store.insert("quizzes", make_quiz(i))
        assert len(store.select("quizzes", limit=2)) == 2

    def test_unknown_table(self, store):
        with pytest.raises(KeyError):
            store.select("nope")

    def test_update_record_success(self, store):
        store.insert("quizzes", make_quiz(1))
        updated = store.update("quizzes", {"title": "Renamed"}, {"id": 1})
        assert [q.title for q in updated] == ["Renamed"]
        assert store.get_quiz(1).title == "Renamed"

    def test_delete_record_success(self, store):
        store.insert("quizzes", make_quiz(1))
        store.insert("quizzes", make_quiz(2))
        deleted = store.delete("quizzes", {"id": 1})
        assert [q.id for q in deleted] == [1]
        assert [q.id for q in store.select("quizzes")] == [2]

    def test_upsert_replaces_by_id(self, store):
        store.insert("quizzes", make_quiz(1, title="Old"))
        store.upsert("quizzes", make_quiz(1, title="New"))
        assert [q.title for q in store.select("quizzes")] == ["New"]

    def test_get_missing_raises_not_found(self, store):
        with pytest.raises(NotFoundError) as exc_info:
            store.get_quiz(42)
        assert exc_info.value.detail == "Quiz not found"

        with pytest.raises(NotFoundError) as exc_info:
            store.get_attempt(42)
        assert exc_info.value.detail == "Quiz attempt not found"

    def test_find_user_by_email_case_insensitive(self, store):
        store.insert("users", User(email="mixed@example.com", password_hash="x"))
        assert store.find_user_by_email("MIXED@Example.com") is not None
        assert store.find_user_by_email("other@example.com") is None


class TestPersistence:
    """Test JSON save and load"""

    def fill(self, store):
        store.insert("users", User(id="u1", email="u1@example.com", password_hash="h"))
        store.insert("categories", Category(id=1, name="Programming"))
        store.insert("quizzes", make_quiz(1))
        store.insert("quiz_attempts", QuizAttempt(
            id=1, quiz_id=1, user_id="u1", score=1, max_score=2, completed_at=get_local_time()))
        store.insert("quiz_attempts", QuizAttempt(id=2, quiz_id=1, user_id="u1", max_score=2))
        store.insert("user_answers", UserAnswer(id=1, attempt_id=1, question_id=1, is_correct=True, points_awarded=1))
        store.insert("user_answers", UserAnswer(id=2, attempt_id=2, question_id=1))

    def test_save_and_load(self, tmp_path):
        path = tmp_path / "data.json"
        original = DataStore(data_file=str(path))
        self.fill(original)
        original.save()

        loaded = DataStore(data_file=str(path))
        assert loaded.load() is True
        assert loaded.get_user("u1").email == "u1@example.com"
        assert loaded.get_attempt(1).percentage == 50.0
        assert loaded.get_attempt(1).is_completed is True
        assert loaded.next_id("quiz_attempts") == 3

    def test_incomplete_attempts_are_not_saved(self, tmp_path):
        path = tmp_path / "data.json"
        original = DataStore(data_file=str(path))
        self.fill(original)
        original.save()

        payload = json.loads(path.read_text(encoding="utf-8"))
        assert [a["id"] for a in payload["quiz_attempts"]] == [1]
        assert [a["id"] for a in payload["user_answers"]] == [1]

    def test_load_twice_does_not_duplicate(self, tmp_path):
        path = tmp_path / "data.json"
        original = DataStore(data_file=str(path))
        self.fill(original)
        original.save()

        loaded = DataStore(data_file=str(path))
        loaded.load()
        loaded.load()
        assert loaded.count("users") == 1
        assert loaded.count("quiz_attempts") == 1

    def test_load_missing_file(self, tmp_path):
        assert DataStore(data_file=str(tmp_path / "missing.json")).load() is False

    def test_load_corrupt_file(self, tmp_path):
        path = tmp_path / "data.json"
        path.write_text("USERS_START\nnot json", encoding="utf-8")
        store = DataStore(data_file=str(path))
        with pytest.raises(PersistenceError):
            store.load()
        assert store.count("users") == 0

    def test_save_without_path(self, store):
        with pytest.raises(PersistenceError):
            store.save()

    def test_commit_only_with_autosave(self, tmp_path):
        path = tmp_path / "data.json"
        assert DataStore(data_file=str(path)).commit() is False
        assert not path.exists()

        assert DataStore(data_file=str(path), autosave=True).commit() is True
        assert path.exists()

    def test_commit_swallows_save_failure(self, tmp_path):
        store = DataStore(data_file=str(tmp_path / "data.json"), autosave=True)
        with patch.object(DataStore, "save", side_effect=PersistenceError("disk full")):
            with patch("quizmaker.database.logging") as mock_logging:
                assert store.commit() is False
                mock_logging.error.assert_called_once()
