import logging
from typing import List, Optional

from pydantic import BaseModel

from quizmaker.database import DataStore
from quizmaker.errors import NotFoundError, QuizMakerError, ServiceResult, ValidationError
from quizmaker.models import (
    Question, QuestionOption, QuestionType, Quiz, QuizAttempt, UserAnswer,
)
from quizmaker.utils.time_utils import get_local_time

# Read-side views assembled from id lookups
class QuestionDetail(BaseModel):
    question: Question
    options: List[QuestionOption] = []

    @property
    def correct_option_ids(self) -> List[str]:
        return [str(option.id) for option in self.options if option.is_correct]

class QuizDetail(BaseModel):
    quiz: Quiz
    questions: List[QuestionDetail] = []

    @property
    def max_score(self) -> int:
        return sum(detail.question.points for detail in self.questions)

class AttemptSummary(BaseModel):
    attempt: QuizAttempt
    quiz: Optional[Quiz] = None

    @property
    def quiz_title(self) -> str:
        return self.quiz.title if self.quiz else "Unknown Quiz"


def grade_answer(question: Question, options: List[QuestionOption], answer: UserAnswer) -> bool:
    """Decide whether an answer is correct for its question type.

    Multi-choice needs the exact set of correct options. Short answers only
    need to be non-empty and are left pending review.
    """
    correct_ids = {str(option.id) for option in options if option.is_correct}

    if question.question_type in (QuestionType.SINGLE_CHOICE, QuestionType.TRUE_FALSE):
        selected = (answer.selected_option_ids or "").strip()
        return selected in correct_ids

    if question.question_type == QuestionType.MULTI_CHOICE:
        return set(answer.selected_ids) == correct_ids

    if question.question_type == QuestionType.SHORT_ANSWER:
        return bool(answer.text_answer)

    return False


class QuizService:
    def __init__(self, store: DataStore):
        self.store = store

    def list_available(self) -> ServiceResult:
        """Active, public quizzes in insertion order"""
        quizzes = self.store.select("quizzes", {"is_active": True, "is_public": True})
        return ServiceResult.ok(quizzes)

    def question_count(self, quiz_id: int) -> int:
        return self.store.count("questions", {"quiz_id": quiz_id})

    def category_name(self, quiz: Quiz) -> str:
        categories = self.store.select("categories", {"id": quiz.category_id}, limit=1)
        return categories[0].name if categories else "Uncategorized"

    def creator_name(self, quiz: Quiz) -> str:
        creators = self.store.select("users", {"id": quiz.created_by_id}, limit=1)
        return creators[0].full_name if creators else "Unknown"

    def load_detail(self, quiz: Quiz) -> QuizDetail:
        questions = [
            QuestionDetail(question=question, options=self.store.options_for(question.id))
            for question in self.store.questions_for(quiz.id)
        ]
        return QuizDetail(quiz=quiz, questions=questions)

    def get_quiz(self, quiz_id: int) -> ServiceResult:
        """Quiz with its questions and options, each ordered by order index"""
        try:
            quiz = self.store.get_quiz(quiz_id)
            return ServiceResult.ok(self.load_detail(quiz))
        except NotFoundError as e:
            return ServiceResult.failure(e)

    def start_attempt(self, quiz_id: int, user_id: str) -> ServiceResult:
        try:
            quiz = self.store.get_quiz(quiz_id)
            questions = self.store.questions_for(quiz.id)
            if not questions:
                raise QuizMakerError("Quiz has no questions")

            attempt = QuizAttempt(
                id=self.store.next_id("quiz_attempts"),
                quiz_id=quiz.id,
                user_id=user_id,
                started_at=get_local_time(),
                max_score=sum(question.points for question in questions),
            )
            self.store.insert("quiz_attempts", attempt)
            logging.info(f"Started attempt {attempt.id} on quiz {quiz.id} for user {user_id}")
            return ServiceResult.ok(attempt)
        except QuizMakerError as e:
            return ServiceResult.failure(e)

    def submit_answers(self, attempt_id: int, answers: List[UserAnswer]) -> ServiceResult:
        """Grade a batch of answers and complete the attempt.

        Submitting again for the same attempt replaces the earlier answers and score.
        A batch holding two answers for one question is rejected.
        """
        try:
            attempt = self.store.get_attempt(attempt_id)
            questions = {question.id: question for question in self.store.questions_for(attempt.quiz_id)}

            seen = set()
            duplicates = []
            for answer in answers:
                if answer.question_id in seen and answer.question_id not in duplicates:
                    duplicates.append(answer.question_id)
                seen.add(answer.question_id)
            if duplicates:
                raise ValidationError([f"Duplicate answer for question {question_id}" for question_id in duplicates])

            previous = self.store.delete("user_answers", {"attempt_id": attempt.id})
            if previous:
                logging.warning(f"Attempt {attempt.id} resubmitted, replacing {len(previous)} answers")

            total_score = 0
            for answer in answers:
                answer.id = self.store.next_id("user_answers")
                answer.attempt_id = attempt.id
                answer.is_correct = False
                answer.points_awarded = 0

                question = questions.get(answer.question_id)
                if question is not None:
                    answer.is_correct = grade_answer(question, self.store.options_for(question.id), answer)
                    answer.points_awarded = question.points if answer.is_correct else 0
                    answer.pending_review = question.question_type == QuestionType.SHORT_ANSWER
                    total_score += answer.points_awarded
                else:
                    logging.warning(f"Answer for unknown question {answer.question_id} on attempt {attempt.id}")

                self.store.insert("user_answers", answer)

            attempt.score = total_score
            attempt.completed_at = get_local_time()
            self.store.commit()
            logging.info(f"Attempt {attempt.id} scored {attempt.score}/{attempt.max_score}")
            return ServiceResult.ok(attempt)
        except QuizMakerError as e:
            return ServiceResult.failure(e)

    def abandon_attempt(self, attempt_id: int) -> ServiceResult:
        """Drop an attempt that was never completed (e.g. the timer ran out)"""
        try:
            attempt = self.store.get_attempt(attempt_id)
            if attempt.is_completed:
                raise QuizMakerError("Completed attempts cannot be abandoned")
            self.store.delete("user_answers", {"attempt_id": attempt.id})
            self.store.delete("quiz_attempts", {"id": attempt.id})
            logging.info(f"Abandoned attempt {attempt.id} on quiz {attempt.quiz_id}")
            return ServiceResult.ok(attempt)
        except QuizMakerError as e:
            return ServiceResult.failure(e)

    def attempt_answers(self, attempt_id: int) -> ServiceResult:
        try:
            attempt = self.store.get_attempt(attempt_id)
            return ServiceResult.ok(self.store.answers_for(attempt.id))
        except NotFoundError as e:
            return ServiceResult.failure(e)

    def list_user_attempts(self, user_id: str) -> ServiceResult:
        """Completed attempts for a user, newest first, each with its quiz"""
        attempts = [a for a in self.store.select("quiz_attempts", {"user_id": user_id}) if a.is_completed]
        attempts.sort(key=lambda a: (a.completed_at, a.id), reverse=True)

        summaries = []
        for attempt in attempts:
            quizzes = self.store.select("quizzes", {"id": attempt.quiz_id}, limit=1)
            summaries.append(AttemptSummary(attempt=attempt, quiz=quizzes[0] if quizzes else None))
        return ServiceResult.ok(summaries)
