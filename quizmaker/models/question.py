from enum import Enum
from pydantic import BaseModel

class QuestionType(str, Enum):
    SINGLE_CHOICE = "single_choice"
    MULTI_CHOICE = "multi_choice"
    TRUE_FALSE = "true_false"
    SHORT_ANSWER = "short_answer"

    @property
    def label(self) -> str:
        return {
            QuestionType.SINGLE_CHOICE: "Multiple Choice (Single Answer)",
            QuestionType.MULTI_CHOICE: "Multiple Choice (Multiple Answers)",
            QuestionType.TRUE_FALSE: "True/False",
            QuestionType.SHORT_ANSWER: "Short Answer",
        }[self]

    @property
    def has_options(self) -> bool:
        return self is not QuestionType.SHORT_ANSWER

class Question(BaseModel):
    id: int
    quiz_id: int
    text: str
    question_type: QuestionType
    points: int = 1
    order_index: int = 0

    def __repr__(self):
        return f"<Question(id={self.id}, quiz_id={self.quiz_id}, text={self.text[:20]})>"

class QuestionOption(BaseModel):
    id: int
    question_id: int
    text: str
    is_correct: bool = False
    order_index: int = 0

    def __repr__(self):
        return f"<QuestionOption(id={self.id}, question_id={self.question_id}, correct={self.is_correct})>"
