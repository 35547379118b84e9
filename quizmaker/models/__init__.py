from .user import User, ADMIN_ROLE, USER_ROLE
from .category import Category
from .quiz import Quiz
from .question import Question, QuestionOption, QuestionType
from .quiz_attempt import QuizAttempt
from .user_answer import UserAnswer

__all__ = [
    "User", "ADMIN_ROLE", "USER_ROLE", "Category", "Quiz", "Question",
    "QuestionOption", "QuestionType", "QuizAttempt", "UserAnswer",
]
