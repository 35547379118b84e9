import logging
from collections import Counter
from typing import List, Optional

from pydantic import BaseModel

from quizmaker.config import settings
from quizmaker.database import DataStore
from quizmaker.errors import QuizMakerError, ServiceResult, ValidationError
from quizmaker.models import Question, QuestionOption, QuestionType, Quiz, User
from quizmaker.utils.auth_utils import require_admin
from quizmaker.utils.time_utils import get_local_time

TRUE_FALSE_OPTIONS = ["True", "False"]

class QuestionCreate(BaseModel):
    text: str
    question_type: QuestionType
    points: int = 1
    options: List[str] = []
    correct_options: List[int] = []  # zero-based positions in options

    def option_texts(self) -> List[str]:
        if self.question_type == QuestionType.TRUE_FALSE:
            return list(TRUE_FALSE_OPTIONS)
        if self.question_type == QuestionType.SHORT_ANSWER:
            return []
        return [text.strip() or f"Option {i + 1}" for i, text in enumerate(self.options)]

    def validate_fields(self) -> List[str]:
        errors = []
        if not self.text.strip():
            errors.append("Question text is required")
        if not self.question_type.has_options:
            return errors

        option_count = len(self.option_texts())
        if self.question_type != QuestionType.TRUE_FALSE and not (
            settings.min_options <= option_count <= settings.max_options
        ):
            errors.append(f"Questions need between {settings.min_options} and {settings.max_options} options")

        correct = set(self.correct_options)
        if any(index < 0 or index >= option_count for index in correct):
            errors.append("Correct option is out of range")
        elif not correct:
            errors.append("At least one correct option is required")
        elif self.question_type != QuestionType.MULTI_CHOICE and len(correct) != 1:
            errors.append("Exactly one correct option is required")
        return errors

class QuizCreate(BaseModel):
    title: str
    description: Optional[str] = None
    category_id: int
    time_limit: int = 0  # In minutes
    is_public: bool = True
    questions: List[QuestionCreate] = []


class AdminService:
    def __init__(self, store: DataStore):
        self.store = store

    def create_quiz(self, quiz_data: QuizCreate, creator: User) -> ServiceResult:
        """Create a quiz with its questions and options"""
        try:
            require_admin(creator)

            errors = []
            if not quiz_data.title.strip():
                errors.append("Quiz title is required")
            categories = self.store.select("categories", {"id": quiz_data.category_id, "is_active": True})
            if not categories:
                errors.append("Invalid category ID")
            if not quiz_data.questions:
                errors.append("Quiz must have at least one question")
            for i, question in enumerate(quiz_data.questions):
                errors.extend(f"Question {i + 1}: {error}" for error in question.validate_fields())
            if errors:
                raise ValidationError(errors)

            quiz = Quiz(
                id=self.store.next_id("quizzes"),
                title=quiz_data.title.strip(),
                description=quiz_data.description,
                category_id=quiz_data.category_id,
                created_by_id=creator.id,
                is_public=quiz_data.is_public,
                time_limit=max(0, quiz_data.time_limit),
                created_at=get_local_time(),
            )
            self.store.insert("quizzes", quiz)

            for order, question_data in enumerate(quiz_data.questions):
                self.add_question(quiz.id, question_data, order)

            self.store.commit()
            logging.info(f"Admin {creator.id} created quiz {quiz.id} ({quiz.title})")
            return ServiceResult.ok(quiz)
        except QuizMakerError as e:
            return ServiceResult.failure(e)

    def add_question(self, quiz_id: int, question_data: QuestionCreate, order: int) -> Question:
        question = Question(
            id=self.store.next_id("questions"),
            quiz_id=quiz_id,
            text=question_data.text.strip(),
            question_type=question_data.question_type,
            points=max(1, question_data.points),
            order_index=order,
        )
        self.store.insert("questions", question)

        correct = set(question_data.correct_options)
        for index, text in enumerate(question_data.option_texts()):
            self.store.insert("question_options", QuestionOption(
                id=self.store.next_id("question_options"),
                question_id=question.id,
                text=text,
                is_correct=index in correct,
                order_index=index,
            ))
        return question

    def active_categories(self, admin_user: User) -> ServiceResult:
        """Categories a new quiz can be filed under"""
        try:
            require_admin(admin_user)
            return ServiceResult.ok(self.store.select("categories", {"is_active": True}))
        except QuizMakerError as e:
            return ServiceResult.failure(e)

    def system_stats(self, admin_user: User) -> ServiceResult:
        """Overall platform counts"""
        try:
            require_admin(admin_user)
            return ServiceResult.ok({
                "total_users": self.store.count("users"),
                "total_quizzes": self.store.count("quizzes"),
                "total_questions": self.store.count("questions"),
                "total_quiz_attempts": self.store.count("quiz_attempts"),
                "active_categories": self.store.count("categories", {"is_active": True}),
            })
        except QuizMakerError as e:
            return ServiceResult.failure(e)

    def _completed_attempts(self):
        attempts = [a for a in self.store.select("quiz_attempts") if a.is_completed]
        attempts.sort(key=lambda a: (a.completed_at, a.id), reverse=True)
        return attempts

    def _user_name(self, user_id: str) -> str:
        users = self.store.select("users", {"id": user_id}, limit=1)
        return users[0].full_name if users else "Unknown User"

    def _quiz_title(self, quiz_id: int) -> str:
        quizzes = self.store.select("quizzes", {"id": quiz_id}, limit=1)
        return quizzes[0].title if quizzes else "Unknown Quiz"

    def most_active_user(self) -> Optional[str]:
        counts = Counter(a.user_id for a in self._completed_attempts())
        if not counts:
            return None
        user_id, total = counts.most_common(1)[0]
        return f"{self._user_name(user_id)} ({total} attempts)"

    def most_popular_quiz(self) -> Optional[str]:
        counts = Counter(a.quiz_id for a in self._completed_attempts())
        if not counts:
            return None
        quiz_id, total = counts.most_common(1)[0]
        return f"{self._quiz_title(quiz_id)} ({total} attempts)"

    def quiz_results(self, admin_user: User, recent_limit: int = 5) -> ServiceResult:
        """Completed attempts grouped by quiz with per-quiz and overall statistics"""
        try:
            require_admin(admin_user)
            attempts = self._completed_attempts()

            grouped = {}
            for attempt in attempts:
                grouped.setdefault(attempt.quiz_id, []).append(attempt)

            quiz_stats = []
            for quiz_id, quiz_attempts in grouped.items():
                percentages = [a.percentage for a in quiz_attempts]
                quiz_stats.append({
                    "quiz_id": quiz_id,
                    "title": self._quiz_title(quiz_id),
                    "total_attempts": len(quiz_attempts),
                    "average_percentage": round(sum(percentages) / len(percentages), 2),
                    "highest_percentage": max(percentages),
                    "lowest_percentage": min(percentages),
                    "recent_attempts": [
                        {
                            "user_name": self._user_name(a.user_id),
                            "score": a.score,
                            "max_score": a.max_score,
                            "percentage": a.percentage,
                            "completed_at": a.completed_at,
                        }
                        for a in quiz_attempts[:recent_limit]
                    ],
                })

            overall = [a.percentage for a in attempts]
            return ServiceResult.ok({
                "total_completed_attempts": len(attempts),
                "quiz_statistics": quiz_stats,
                "average_percentage": round(sum(overall) / len(overall), 2) if overall else 0.0,
                "total_points_awarded": sum(a.score for a in attempts),
                "most_active_user": self.most_active_user(),
                "most_popular_quiz": self.most_popular_quiz(),
            })
        except QuizMakerError as e:
            return ServiceResult.failure(e)
