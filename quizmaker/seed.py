import logging

from quizmaker.database import DataStore
from quizmaker.models import ADMIN_ROLE, USER_ROLE, Category, QuestionType, Quiz, User
from quizmaker.services.admin import AdminService, QuestionCreate
from quizmaker.utils.auth_utils import hash_password

SINGLE = QuestionType.SINGLE_CHOICE
MULTI = QuestionType.MULTI_CHOICE
TRUE_FALSE = QuestionType.TRUE_FALSE
SHORT = QuestionType.SHORT_ANSWER

category_data = [
    {"id": 1, "name": "Programming", "description": "Programming and computer science"},
    {"id": 2, "name": "General Knowledge", "description": "General knowledge questions"},
    {"id": 3, "name": "Science", "description": "Science and technology questions"},
    {"id": 4, "name": "Mathematics", "description": "Math and calculation questions"},
]

# Demo accounts shown on the login screen
user_data = [
    {"id": "admin-123", "email": "admin@quizmaker.com", "password": "admin123",
     "first_name": "Admin", "last_name": "User", "role": ADMIN_ROLE},
    {"id": "user-123", "email": "john@example.com", "password": "user123",
     "first_name": "John", "last_name": "Doe", "role": USER_ROLE},
]

# (text, type, points, options, zero-based correct positions)
quiz_data = [
    {
        "title": "Python Programming Fundamentals",
        "description": "Core Python syntax and concepts",
        "category_id": 1,
        "time_limit": 2,
        "questions": [
            ("Which keyword defines a function in Python?", SINGLE, 2,
             ["func", "def", "function", "lambda:"], [1]),
            ("Python is a case-sensitive language.", TRUE_FALSE, 1, [], [0]),
            ("Which of these are built-in Python collection types? (Select all that apply)", MULTI, 3,
             ["list", "dict", "array", "tuple"], [0, 1, 3]),
            ("What does PEP stand for?", SINGLE, 2,
             ["Python Enhancement Proposal", "Python Execution Plan",
              "Program Extension Package", "Public Extension Protocol"], [0]),
            ("Exceptions in Python are handled with try/except blocks.", TRUE_FALSE, 1, [], [0]),
            ("Which values are falsy in Python? (Select all that apply)", MULTI, 2,
             ["0", "\"\"", "[]", "\"False\""], [0, 1, 2]),
            ("Strings in Python are immutable.", TRUE_FALSE, 1, [], [0]),
            ("Which syntax declares that class B inherits from A?", SINGLE, 2,
             ["class B extends A:", "class B(A):", "class B : A", "class B inherits A:"], [1]),
        ],
    },
    {
        "title": "World Geography Quiz",
        "description": "Capitals, continents and landmarks",
        "category_id": 2,
        "time_limit": 2,
        "questions": [
            ("What is the capital of France?", SINGLE, 1, ["London", "Berlin", "Paris", "Madrid"], [2]),
            ("The Great Wall of China was built to protect against invasions.", TRUE_FALSE, 1, [], [0]),
            ("Which planet is known as the Red Planet?", SINGLE, 1, ["Venus", "Mars", "Jupiter", "Saturn"], [1]),
            ("Which of these are continents? (Select all that apply)", MULTI, 2,
             ["Asia", "Europe", "Greenland", "Antarctica"], [0, 1, 3]),
            ("The Pacific Ocean is the largest ocean on Earth.", TRUE_FALSE, 1, [], [0]),
            ("What is the highest mountain in the world?", SINGLE, 1,
             ["K2", "Mount Everest", "Kilimanjaro", "Denali"], [1]),
        ],
    },
    {
        "title": "Science Basics",
        "description": "Everyday physics, chemistry and biology",
        "category_id": 3,
        "time_limit": 3,
        "questions": [
            ("What is the chemical symbol for water?", SINGLE, 1, ["O2", "H2O", "CO2", "HO"], [1]),
            ("Sound travels faster than light.", TRUE_FALSE, 1, [], [1]),
            ("Which of these are noble gases? (Select all that apply)", MULTI, 2,
             ["Helium", "Oxygen", "Neon", "Argon"], [0, 2, 3]),
            ("Name the process plants use to turn sunlight into energy.", SHORT, 2, [], []),
        ],
    },
]


def seed_store(store: DataStore) -> None:
    """Fill an empty store with reference data, demo accounts and sample quizzes"""
    if not store.select("categories"):
        for category in category_data:
            store.insert("categories", Category(**category))

    if not store.select("users"):
        for user in user_data:
            fields = {key: value for key, value in user.items() if key != "password"}
            store.insert("users", User(password_hash=hash_password(user["password"]), **fields))

    admin = AdminService(store)
    creator = store.find_user_by_email("admin@quizmaker.com")
    creator_id = creator.id if creator else "admin-123"

    for data in quiz_data:
        if store.select("quizzes", {"title": data["title"]}):
            continue
        quiz = store.insert("quizzes", Quiz(
            id=store.next_id("quizzes"),
            title=data["title"],
            description=data["description"],
            category_id=data["category_id"],
            created_by_id=creator_id,
            time_limit=data["time_limit"],
        ))
        for order, (text, question_type, points, options, correct) in enumerate(data["questions"]):
            admin.add_question(quiz.id, QuestionCreate(
                text=text,
                question_type=question_type,
                points=points,
                options=options,
                correct_options=correct,
            ), order)

    logging.info(f"Seeded store with {store.count('quizzes')} quizzes and {store.count('users')} users")
