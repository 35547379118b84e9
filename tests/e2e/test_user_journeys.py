"""
End-to-end console journeys driven with scripted input and a fake clock
"""
from quizmaker.cli import SessionState

USER_EMAIL = "test@example.com"
ADMIN_EMAIL = "admin@quizmaker.test"
PASSWORD = "testpassword123"


def login_lines(email):
    return ["1", email, PASSWORD]


class TestUserJourneys:
    """Complete user flows through the console"""

    def test_take_quiz_all_correct(self, store, run_console, two_question_quiz, regular_user):
        lines = login_lines(USER_EMAIL) + [
            "2", str(two_question_quiz.id),  # take quiz
            "",                               # start
            "1",                              # Pick A -> "A"
            "1",                              # Say True -> "True"
            "",                               # leave results
            "3",                              # history
            "0",
        ]
        app, output = run_console(store, lines)

        assert "Welcome, Test!" in output
        assert "Your Score: 2 / 2 points" in output
        assert "Percentage: 100.0%" in output
        assert "Excellent" in output
        assert "Total quizzes taken: 1" in output
        assert app.state == SessionState.EXIT
        attempts = store.select("quiz_attempts")
        assert len(attempts) == 1 and attempts[0].is_completed

    def test_take_quiz_all_wrong(self, store, run_console, two_question_quiz, regular_user):
        lines = login_lines(USER_EMAIL) + ["2", str(two_question_quiz.id), "", "2", "2", "", "0"]
        _, output = run_console(store, lines)

        assert "Your Score: 0 / 2 points" in output
        assert "Percentage: 0.0%" in output
        assert "Keep practicing!" in output
        assert "🔵 A" in output
        assert "❌ B" in output

    def test_time_expires_while_answering(self, store, run_console, two_question_quiz, regular_user):
        """Answers typed after the deadline are discarded and the attempt is dropped"""
        lines = login_lines(USER_EMAIL) + [
            "2", str(two_question_quiz.id), "",
            ("1", 30),   # first answer in time
            ("1", 31),   # second answer lands after the minute is up
            "",
            "0",
        ]
        _, output = run_console(store, lines)

        assert "TIME EXPIRED!" in output
        assert "Questions answered: 1 out of 2" in output
        assert "QUIZ COMPLETED" not in output
        assert store.select("quiz_attempts") == []
        assert store.select("user_answers") == []

    def test_time_expires_before_next_question(self, store, run_console, two_question_quiz, regular_user):
        lines = login_lines(USER_EMAIL) + ["2", str(two_question_quiz.id), "", ("1", 120), "", "0"]
        _, output = run_console(store, lines)

        assert "Questions answered: 0 out of 2" in output
        assert "Question 2 of 2" not in output

    def test_quiz_listing_shows_category_and_creator(self, store, run_console, two_question_quiz, regular_user):
        _, output = run_console(store, login_lines(USER_EMAIL) + ["1", "0"])

        assert "Category: Programming" in output
        assert "Created by: Ada Admin" in output
        assert "Time Limit: 1 minutes" in output

    def test_invalid_quiz_id(self, store, run_console, two_question_quiz, regular_user):
        _, output = run_console(store, login_lines(USER_EMAIL) + ["2", "999", "0"])
        assert "Quiz not found" in output

    def test_register_with_mismatched_passwords(self, store, run_console):
        lines = ["2", "Jane", "Doe", "jane@example.com", "abc123", "abc124", "0"]
        _, output = run_console(store, lines)

        assert "Passwords do not match" in output
        assert store.count("users") == 0

    def test_register_then_login(self, store, run_console):
        lines = ["2", "Jane", "Doe", "jane@example.com", "abc123", "abc123",
                 "1", "jane@example.com", "abc123", "0"]
        _, output = run_console(store, lines)

        assert "Account created for jane@example.com" in output
        assert "Welcome, Jane!" in output

    def test_wrong_password(self, store, run_console, regular_user):
        _, output = run_console(store, ["1", USER_EMAIL, "not-the-password1", "0"])
        assert "Invalid email or password" in output
        assert "MAIN MENU" not in output

    def test_demo_account_login(self, seeded_store, run_console):
        _, output = run_console(seeded_store, ["3", "2", "1", "0"])

        assert "Welcome, John!" in output
        assert "Python Programming Fundamentals" in output
        assert "World Geography Quiz" in output

    def test_logout_returns_to_login(self, store, run_console, regular_user):
        app, output = run_console(store, login_lines(USER_EMAIL) + ["9", "0"])
        assert output.count("WELCOME TO QUIZMAKER") == 2
        assert app.current_user is None

    def test_end_of_input_exits_cleanly(self, store, run_console, regular_user):
        app, output = run_console(store, login_lines(USER_EMAIL))
        assert app.state == SessionState.EXIT
        assert "Thanks for using" in output


class TestRoleGating:
    """Admin menu entries are only usable by admins"""

    def test_regular_user_denied(self, store, run_console, regular_user):
        _, output = run_console(store, login_lines(USER_EMAIL) + ["4", "5", "6", "0"])

        assert "Admin Panel" not in output
        assert output.count("Access denied.") == 3

    def test_admin_panel_and_results(self, store, run_console, quiz_service, two_question_quiz,
                                     regular_user, admin_user, answer_for):
        attempt = quiz_service.start_attempt(two_question_quiz.id, regular_user.id).data
        quiz_service.submit_answers(attempt.id, [answer_for(two_question_quiz.id, "Pick A", "A")])

        _, output = run_console(store, login_lines(ADMIN_EMAIL) + ["4", "5", "0"])

        assert "Total Users: 2" in output
        assert "Total Quiz Attempts: 1" in output
        assert "QUIZ: Two Questions" in output
        assert "Test User: 1/2 (50.0%)" in output
        assert "Most Active User: Test User (1 attempts)" in output

    def test_admin_creates_quiz(self, store, run_console, admin_user, categories):
        lines = login_lines(ADMIN_EMAIL) + [
            "6",
            "CLI Quiz", "Made in the console", "1", "0", "y",
            "Is the sky blue?", "3", "", "t", "y",              # true/false
            "Pick the vowels", "2", "2", "3", "a", "b", "e", "1,3", "n",  # multi choice
            "0",
        ]
        _, output = run_console(store, lines)

        assert "QUIZ CREATED SUCCESSFULLY!" in output
        assert "1. Programming" in output
        assert "2. Retired" not in output
        quiz =store.select("quizzes", {"title": "CLI Quiz"})[0]
        assert quiz.time_limit == 0
        questions = store.questions_for(quiz.id)
        assert [q.points for q in questions] == [1, 2]
        assert [o.is_correct for o in store.options_for(questions[1].id)] == [True, False, True]

    def test_admin_quiz_creation_requires_a_question(self, store, run_console, admin_user, categories):
        lines = login_lines(ADMIN_EMAIL) + ["6", "Empty", "", "1", "0", "y", "done"]
        _, output = run_console(store, lines)

        assert "Quiz must have at least one question!" in output
        assert store.select("quizzes") == []
