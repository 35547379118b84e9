import io
import pytest
from quizmaker.database import DataStore
from quizmaker.main import build_app
from quizmaker.models import QuestionType, User, UserAnswer
from quizmaker.seed import seed_store
from quizmaker.services.admin import AdminService, QuestionCreate, QuizCreate
from quizmaker.services.auth import AuthService
from quizmaker.services.quizzes import QuizService
from quizmaker.utils.auth_utils import hash_password

@pytest.fixture
def store():
    """Empty in-memory store with no data file"""
    return DataStore()

@pytest.fixture
def seeded_store():
    """Store filled with the demo accounts and sample quizzes"""
    data_store = DataStore()
    seed_store(data_store)
    return data_store

@pytest.fixture
def auth_service(store):
    return AuthService(store)

@pytest.fixture
def quiz_service(store):
    return QuizService(store)

@pytest.fixture
def admin_service(store):
    return AdminService(store)

@pytest.fixture
def admin_user(store):
    user = User(
        id="admin-1",
        email=TestConfig.TEST_ADMIN_EMAIL,
        password_hash=hash_password(TestConfig.TEST_PASSWORD),
        first_name="Ada",
        last_name="Admin",
        role="Admin",
    )
    return store.insert("users", user)

@pytest.fixture
def regular_user(store):
    user = User(
        id="user-1",
        email=TestConfig.TEST_USER_EMAIL,
        password_hash=hash_password(TestConfig.TEST_PASSWORD),
        first_name="Test",
        last_name="User",
    )
    return store.insert("users", user)

@pytest.fixture
def categories(store):
    from quizmaker.models import Category
    store.insert("categories", Category(id=1, name="Programming"))
    store.insert("categories", Category(id=2, name="Retired", is_active=False))
    return store.select("categories")

@pytest.fixture
def two_question_quiz(store, admin_service, admin_user, categories):
    """1pt single-choice (correct "A") followed by 1pt true/false (correct "True")"""
    result = admin_service.create_quiz(QuizCreate(
        title="Two Questions",
        description="Scoring scenario",
        category_id=1,
        time_limit=1,
        questions=[
            QuestionCreate(text="Pick A", question_type=QuestionType.SINGLE_CHOICE,
                           options=["A", "B"], correct_options=[0]),
            QuestionCreate(text="Say True", question_type=QuestionType.TRUE_FALSE, correct_options=[0]),
        ],
    ), admin_user)
    assert result.success, result.errors
    return result.data

@pytest.fixture
def mixed_quiz(store, admin_service, admin_user, categories):
    """One question of every type with different point values"""
    result = admin_service.create_quiz(QuizCreate(
        title="Mixed Types",
        category_id=1,
        questions=[
            QuestionCreate(text="Capital of France?", question_type=QuestionType.SINGLE_CHOICE, points=2,
                           options=["London", "Paris", "Rome"], correct_options=[1]),
            QuestionCreate(text="Primes?", question_type=QuestionType.MULTI_CHOICE, points=3,
                           options=["2", "3", "4", "5"], correct_options=[0, 1, 3]),
            QuestionCreate(text="Water is wet.", question_type=QuestionType.TRUE_FALSE, points=1,
                           correct_options=[0]),
            QuestionCreate(text="Describe photosynthesis.", question_type=QuestionType.SHORT_ANSWER, points=4),
        ],
    ), admin_user)
    assert result.success, result.errors
    return result.data

@pytest.fixture
def answer_for(store):
    """Build an answer by option text instead of option id"""
    def _answer_for(quiz_id, question_text, *option_texts, text_answer=None):
        question = next(q for q in store.questions_for(quiz_id) if q.text == question_text)
        options = store.options_for(question.id)
        ids = [str(o.id) for text in option_texts for o in options if o.text == text]
        return UserAnswer(
            question_id=question.id,
            selected_option_ids=",".join(ids) if ids else None,
            text_answer=text_answer,
        )
    return _answer_for


class FakeClock:
    """Monotonic clock the tests move by hand"""

    def __init__(self, start=1000.0):
        self.now = start

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += seconds


class ScriptedInput:
    """Feeds prepared lines to the console; a (line, seconds) pair also moves the clock"""

    def __init__(self, lines, clock=None):
        self.lines = list(lines)
        self.clock = clock

    def __call__(self):
        if not self.lines:
            raise EOFError
        line = self.lines.pop(0)
        if isinstance(line, tuple):
            line, seconds = line
            self.clock.advance(seconds)
        return line

@pytest.fixture
def fake_clock():
    return FakeClock()

@pytest.fixture
def run_console(fake_clock):
    """Run the console app against a store with scripted input, returning the output text"""
    def _run_console(data_store, lines):
        output = io.StringIO()
        app = build_app(
            data_store,
            input_func=ScriptedInput(lines, clock=fake_clock),
            output=output,
            clock=fake_clock,
        )
        app.run()
        return app, output.getvalue()
    return _run_console


class TestConfig:
    """Test configuration constants"""
    TEST_USER_EMAIL = "test@example.com"
    TEST_ADMIN_EMAIL = "admin@quizmaker.test"
    TEST_PASSWORD = "testpassword123"
