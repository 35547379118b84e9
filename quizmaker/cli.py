"""
Interactive console front end for QuizMaker.

The application is a small state machine::

    AWAITING_LOGIN -> MAIN_MENU -> TAKING_QUIZ -> SHOWING_RESULTS -> MAIN_MENU
    TAKING_QUIZ -> TIME_EXPIRED -> MAIN_MENU

Input, output and the clock are injectable so the loop can be scripted.
"""
import getpass
import logging
import sys
import time
from enum import Enum
from typing import List, Optional

from quizmaker.config import settings
from quizmaker.models import QuestionType, User, UserAnswer
from quizmaker.services.admin import AdminService, QuestionCreate, QuizCreate
from quizmaker.services.auth import AuthService, RegisterRequest
from quizmaker.services.quizzes import QuestionDetail, QuizDetail, QuizService
from quizmaker.utils.time_utils import QuizTimer, format_remaining, format_time_for_display

DEMO_ACCOUNTS = [
    ("admin@quizmaker.com", "admin123", "Admin"),
    ("john@example.com", "user123", "User"),
]


class SessionState(str, Enum):
    AWAITING_LOGIN = "awaiting_login"
    MAIN_MENU = "main_menu"
    TAKING_QUIZ = "taking_quiz"
    SHOWING_RESULTS = "showing_results"
    TIME_EXPIRED = "time_expired"
    EXIT = "exit"


def performance_rating(percentage: float) -> str:
    """Qualitative band for a percentage score"""
    if percentage >= 90:
        return "🌟 Excellent!"
    if percentage >= 70:
        return "👍 Good!"
    if percentage >= 50:
        return "👌 Fair"
    return "📚 Keep practicing!"


def parse_single_choice(raw: str, detail: QuestionDetail) -> Optional[str]:
    """Map a 1-based option number to the option id, or None if invalid"""
    try:
        choice = int(raw.strip())
    except (ValueError, AttributeError):
        return None
    if 1 <= choice <= len(detail.options):
        return str(detail.options[choice - 1].id)
    return None


def parse_multi_choice(raw: str, detail: QuestionDetail) -> Optional[str]:
    """Map comma-separated option numbers to comma-joined option ids; invalid entries are skipped"""
    selected = []
    for part in (raw or "").split(","):
        part = part.strip()
        if not part.isdigit():
            continue
        choice = int(part)
        if 1 <= choice <= len(detail.options):
            option_id = str(detail.options[choice - 1].id)
            if option_id not in selected:
                selected.append(option_id)
    return ",".join(selected) if selected else None


def option_marker(selected: bool, correct: bool) -> str:
    if selected and correct:
        return "✅"
    if selected:
        return "❌"
    if correct:
        return "🔵"
    return "⚪"


class QuizApplication:
    def __init__(self, auth_service: AuthService, quiz_service: QuizService, admin_service: AdminService,
                 input_func=None, output=None, clock=time.monotonic, password_func=None):
        self.auth_service = auth_service
        self.quiz_service = quiz_service
        self.admin_service = admin_service
        self.input_func = input_func or input
        self.password_func = password_func or (
            (lambda: getpass.getpass(prompt="")) if input_func is None else self.input_func
        )
        self.output = output or sys.stdout
        self.clock = clock

        self.state = SessionState.AWAITING_LOGIN
        self.current_user: Optional[User] = None
        self.selected_quiz_id: Optional[int] = None
        self.result = None
        self.expired = None

    # Console helpers

    def say(self, text: str = "") -> None:
        print(text, file=self.output)

    def ask(self, prompt: str) -> str:
        self.output.write(prompt)
        self.output.flush()
        return self.input_func()

    def ask_password(self, prompt: str) -> str:
        self.output.write(prompt)
        self.output.flush()
        return self.password_func()

    def pause(self, prompt: str = "Press Enter to continue...") -> None:
        self.ask(prompt)

    @property
    def is_admin(self) -> bool:
        return self.auth_service.is_in_role(self.current_user, "Admin")

    # Main loop

    def run(self) -> None:
        self.say(f"🎯 Welcome to {settings.app_name} - Interactive Quiz Platform!")
        self.say("=" * 51)
        handlers = {
            SessionState.AWAITING_LOGIN: self.login_menu,
            SessionState.MAIN_MENU: self.main_menu,
            SessionState.TAKING_QUIZ: self.take_quiz,
            SessionState.SHOWING_RESULTS: self.show_results,
            SessionState.TIME_EXPIRED: self.show_time_expired,
        }
        try:
            while self.state != SessionState.EXIT:
                handlers[self.state]()
        except (EOFError, KeyboardInterrupt):
            logging.info("Input closed, leaving the session")
            self.state = SessionState.EXIT
            self.say()
        self.say(f"👋 Thanks for using {settings.app_name}!")

    # AWAITING_LOGIN

    def login_menu(self) -> None:
        self.say("\n🔐 WELCOME TO QUIZMAKER")
        self.say("========================")
        self.say("1. 🔑 Login to existing account")
        self.say("2. 📝 Create new account")
        self.say("3. 🧪 Use demo accounts")
        self.say("0. 🚪 Exit")
        choice = self.ask("Select an option: ").strip()

        if choice == "1":
            self.login()
        elif choice == "2":
            self.register()
        elif choice == "3":
            self.demo_login()
        elif choice == "0":
            self.state = SessionState.EXIT
        else:
            self.say("❌ Invalid option. Please try again.")

    def complete_login(self, email: str, password: str) -> bool:
        result = self.auth_service.login(email, password)
        if not result.success:
            if len(result.errors) > 1:
                self.say("\n❌ Validation errors:")
                for error in result.errors:
                    self.say(f"   • {error}")
            else:
                self.say(f"\n❌ {result.message}")
            return False

        self.current_user = result.data
        self.state = SessionState.MAIN_MENU
        self.say(f"\n👋 Welcome, {self.current_user.first_name}!")
        return True

    def login(self) -> None:
        self.say("\n🔑 LOGIN")
        self.say("=========")
        email = self.ask("Email: ").strip()
        password = self.ask_password("Password: ")
        self.complete_login(email, password)

    def register(self) -> None:
        self.say("\n📝 CREATE NEW ACCOUNT")
        self.say("======================")
        request = RegisterRequest(
            first_name=self.ask("First name: "),
            last_name=self.ask("Last name: "),
            email=self.ask("Email: "),
            password=self.ask_password("Password: "),
            confirm_password=self.ask_password("Confirm password: "),
        )
        result = self.auth_service.register(request)
        if result.success:
            self.say(f"\n✅ Account created for {result.data.email}!")
            self.say("You can now login with your credentials.")
        else:
            self.say("\n❌ Registration failed:")
            for error in result.errors:
                self.say(f"   • {error}")

    def demo_login(self) -> None:
        self.say("\n🧪 DEMO ACCOUNTS")
        self.say("=================")
        for number, (email, password, role) in enumerate(DEMO_ACCOUNTS, start=1):
            self.say(f"{number}. {email} (Password: {password}) - {role}")
        self.say("0. Back to main menu")
        choice = self.ask("Select an account: ").strip()
        if choice == "0":
            return
        if choice.isdigit() and 1 <= int(choice) <= len(DEMO_ACCOUNTS):
            email, password, _ = DEMO_ACCOUNTS[int(choice) - 1]
            self.complete_login(email, password)
        else:
            self.say("❌ Invalid option.")

    # MAIN_MENU

    def main_menu(self) -> None:
        self.say("\n🎯 MAIN MENU")
        self.say("=============")
        self.say("1. 📝 View Available Quizzes")
        self.say("2. 🎮 Take a Quiz")
        self.say("3. 📊 View My Quiz History")
        if self.is_admin:
            self.say("4. 🔧 Admin Panel")
            self.say("5. 📈 View All Quiz Results (Admin)")
            self.say("6. 🎯 Create New Quiz (Admin)")
        self.say("9. 🔓 Logout")
        self.say("0. 🚪 Exit")
        choice = self.ask("Select an option: ").strip()

        if choice == "1":
            self.view_available_quizzes()
        elif choice == "2":
            self.choose_quiz()
        elif choice == "3":
            self.view_history()
        elif choice in ("4", "5", "6"):
            if not self.is_admin:
                self.say("❌ Access denied.")
            elif choice == "4":
                self.show_admin_panel()
            elif choice == "5":
                self.view_all_results()
            else:
                self.create_quiz()
        elif choice == "9":
            self.current_user = None
            self.state = SessionState.AWAITING_LOGIN
        elif choice == "0":
            self.state = SessionState.EXIT
        else:
            self.say("❌ Invalid option. Please try again.")

    def view_available_quizzes(self) -> bool:
        self.say("\n📝 AVAILABLE QUIZZES")
        self.say("====================")
        result = self.quiz_service.list_available()
        if not result.success or not result.data:
            self.say("❌ No quizzes available.")
            return False

        for quiz in result.data:
            self.say(f"🎯 Quiz ID: {quiz.id}")
            self.say(f"   Title: {quiz.title}")
            self.say(f"   Description: {quiz.description or ''}")
            self.say(f"   Category: {self.quiz_service.category_name(quiz)}")
            self.say(f"   Questions: {self.quiz_service.question_count(quiz.id)}")
            self.say(f"   Time Limit: {f'{quiz.time_limit} minutes' if quiz.time_limit > 0 else 'No limit'}")
            self.say(f"   Created by: {self.quiz_service.creator_name(quiz)}")
            self.say()
        return True

    def choose_quiz(self) -> None:
        self.say("\n🎮 TAKE A QUIZ")
        self.say("===============")
        if not self.view_available_quizzes():
            return
        raw = self.ask("Enter Quiz ID to take: ").strip()
        if not raw.isdigit():
            self.say("❌ Invalid Quiz ID.")
            return
        self.selected_quiz_id = int(raw)
        self.state = SessionState.TAKING_QUIZ

    # TAKING_QUIZ

    def take_quiz(self) -> None:
        self.state = SessionState.MAIN_MENU
        quiz_result = self.quiz_service.get_quiz(self.selected_quiz_id)
        if not quiz_result.success:
            self.say(f"❌ {quiz_result.message}")
            return

        detail: QuizDetail = quiz_result.data
        quiz = detail.quiz
        self.say(f"\n🎯 Starting Quiz: {quiz.title}")
        self.say(f"📝 Description: {quiz.description or ''}")
        if quiz.time_limit > 0:
            self.say(f"⏱️ Time Limit: {quiz.time_limit} minute(s) ({quiz.time_limit * 60} seconds)")
        else:
            self.say("⏱️ Time Limit: No limit")
        self.say(f"📊 Total Questions: {len(detail.questions)}")
        self.say(f"🎯 Max Score: {detail.max_score} points")
        if quiz.time_limit > 0:
            self.say("⚠️ WARNING: Unanswered questions are lost when time runs out!")
        self.say()
        self.pause("Press Enter to start the quiz...")

        attempt_result = self.quiz_service.start_attempt(quiz.id, self.current_user.id)
        if not attempt_result.success:
            self.say(f"❌ {attempt_result.message}")
            return
        attempt = attempt_result.data

        timer = QuizTimer(quiz.time_limit, clock=self.clock)
        answers: List[UserAnswer] = []
        total = len(detail.questions)

        for number, question_detail in enumerate(detail.questions, start=1):
            if timer.expired():
                self.expire(attempt, detail, answers)
                return

            self.render_question(question_detail, number, total, quiz.title, timer)
            answer = self.read_answer(question_detail, attempt.id)

            if timer.expired():
                self.say("\n⏰ TIME'S UP!")
                self.expire(attempt, detail, answers)
                return
            answers.append(answer)

        self.say("\nQuiz completed! Processing results...")
        submit_result = self.quiz_service.submit_answers(attempt.id, answers)
        if not submit_result.success:
            self.say(f"❌ Error submitting quiz: {submit_result.message}")
            return

        self.result = (submit_result.data, detail, answers)
        self.state = SessionState.SHOWING_RESULTS

    def expire(self, attempt, detail: QuizDetail, answers: List[UserAnswer]) -> None:
        self.expired = (attempt, detail, len(answers))
        self.state = SessionState.TIME_EXPIRED

    def render_question(self, question_detail: QuestionDetail, number: int, total: int, title: str,
                        timer: QuizTimer) -> None:
        question = question_detail.question
        self.say(f"\n🎯 Quiz: {title}")
        self.say(f"Question {number} of {total}")
        self.say(f"Points: {question.points}")
        if timer.is_timed:
            self.say(f"⏱️ Time remaining: {format_remaining(timer.remaining())}")
        self.say("=" * 51)
        self.say(f"❓ {question.text}")
        self.say()
        if question.question_type.has_options:
            if question.question_type == QuestionType.MULTI_CHOICE:
                self.say("Select all correct options (enter numbers separated by commas):")
            else:
                self.say("Select one option:")
            for index, option in enumerate(question_detail.options, start=1):
                self.say(f"{index}. {option.text}")

    def read_answer(self, question_detail: QuestionDetail, attempt_id: int) -> UserAnswer:
        question = question_detail.question
        answer = UserAnswer(question_id=question.id, attempt_id=attempt_id)

        if question.question_type == QuestionType.MULTI_CHOICE:
            answer.selected_option_ids = parse_multi_choice(self.ask("\nYour answers (e.g., 1,3,4): "), question_detail)
        elif question.question_type == QuestionType.SHORT_ANSWER:
            answer.text_answer = self.ask("Enter your answer: ").strip() or None
        else:
            answer.selected_option_ids = parse_single_choice(self.ask("\nYour answer (enter number): "), question_detail)
        return answer

    # TIME_EXPIRED

    def show_time_expired(self) -> None:
        attempt, detail, answered = self.expired
        self.quiz_service.abandon_attempt(attempt.id)

        self.say("\n⏰ TIME EXPIRED!")
        self.say("================")
        self.say(f"🚨 Sorry! You ran out of time for quiz: {detail.quiz.title}")
        self.say(f"⏱️ Time limit was: {detail.quiz.time_limit} minute(s)")
        self.say(f"📝 Questions answered: {answered} out of {len(detail.questions)}")
        self.say("Your answers were not submitted.")
        self.say()
        self.say("💡 TIP: Try to answer questions more quickly next time!")
        self.say("🔄 You can retake this quiz anytime to improve your score.")
        self.expired = None
        self.state = SessionState.MAIN_MENU
        self.pause("Press Enter to return to main menu...")

    # SHOWING_RESULTS

    def show_results(self) -> None:
        attempt, detail, answers = self.result
        self.say("\n🎉 QUIZ COMPLETED!")
        self.say("===================")
        self.say(f"📝 Quiz: {detail.quiz.title}")
        self.say(f"⏱️ Completed: {format_time_for_display(attempt.completed_at)}")
        self.say(f"🎯 Your Score: {attempt.score} / {attempt.max_score} points")
        self.say(f"📊 Percentage: {attempt.percentage:.1f}%")
        self.say(f"🏆 Rating: {performance_rating(attempt.percentage)}")

        self.say("\n📋 DETAILED RESULTS:")
        self.say("=====================")
        by_question = {answer.question_id: answer for answer in answers}
        for number, question_detail in enumerate(detail.questions, start=1):
            question = question_detail.question
            answer = by_question.get(question.id)
            if answer is None:
                continue
            self.say(f"\nQuestion {number}: {question.text}")
            self.say(f"Points: {answer.points_awarded}/{question.points}")
            if answer.pending_review:
                self.say(f"Result: 📝 Pending review ({'answered' if answer.is_correct else 'no answer'})")
            else:
                self.say(f"Result: {'✅ Correct' if answer.is_correct else '❌ Incorrect'}")

            if question.question_type == QuestionType.SHORT_ANSWER:
                self.say(f"Your Answer: {answer.text_answer or ''}")
            else:
                selected = set(answer.selected_ids)
                self.say("Options:")
                for option in question_detail.options:
                    self.say(f"  {option_marker(str(option.id) in selected, option.is_correct)} {option.text}")

        self.result = None
        self.state = SessionState.MAIN_MENU
        self.pause("\nPress Enter to return to main menu...")

    # History

    def view_history(self) -> None:
        self.say("\n📊 YOUR QUIZ HISTORY")
        self.say("=====================")
        result = self.quiz_service.list_user_attempts(self.current_user.id)
        if not result.success or not result.data:
            self.say("📭 No quiz history found. Take some quizzes to see your progress!")
            return

        summaries = result.data
        self.say(f"Total quizzes taken: {len(summaries)}\n")
        for summary in summaries[:10]:
            attempt = summary.attempt
            self.say(f"🎯 Quiz: {summary.quiz_title}")
            self.say(f"📅 Date: {format_time_for_display(attempt.completed_at, '%Y-%m-%d %H:%M')}")
            self.say(f"🎯 Score: {attempt.score}/{attempt.max_score} ({attempt.percentage:.1f}%)")
            self.say(f"🏆 Performance: {performance_rating(attempt.percentage)}")
            self.say()

        percentages = [s.attempt.percentage for s in summaries]
        self.say("📈 STATISTICS:")
        self.say(f"   Average Score: {sum(percentages) / len(percentages):.1f}%")
        self.say(f"   Best Score: {max(percentages):.1f}%")
        self.say(f"   Total Points Earned: {sum(s.attempt.score for s in summaries)}")

    # Admin views

    def show_admin_panel(self) -> None:
        self.say("\n🔧 ADMIN PANEL")
        self.say("===============")
        result = self.admin_service.system_stats(self.current_user)
        if not result.success:
            self.say(f"❌ {result.message}")
            return
        stats = result.data
        self.say("✅ Admin privileges verified!")
        self.say("\n📊 SYSTEM STATISTICS:")
        self.say(f"   Total Users: {stats['total_users']}")
        self.say(f"   Total Quizzes: {stats['total_quizzes']}")
        self.say(f"   Total Questions: {stats['total_questions']}")
        self.say(f"   Total Quiz Attempts: {stats['total_quiz_attempts']}")
        self.say(f"   Active Categories: {stats['active_categories']}")

    def view_all_results(self) -> None:
        self.say("\n📈 ALL QUIZ RESULTS (ADMIN VIEW)")
        self.say("==================================")
        result = self.admin_service.quiz_results(self.current_user)
        if not result.success:
            self.say(f"❌ {result.message}")
            return
        report = result.data
        if not report["total_completed_attempts"]:
            self.say("📭 No quiz attempts found.")
            return

        self.say(f"Total completed quiz attempts: {report['total_completed_attempts']}\n")
        for stats in report["quiz_statistics"]:
            self.say(f"🎯 QUIZ: {stats['title']}")
            self.say(f"   Total Attempts: {stats['total_attempts']}")
            self.say(f"   Average Score: {stats['average_percentage']:.1f}%")
            self.say(f"   Highest Score: {stats['highest_percentage']:.1f}%")
            self.say(f"   Lowest Score: {stats['lowest_percentage']:.1f}%")
            self.say("   Recent Attempts:")
            for recent in stats["recent_attempts"]:
                self.say(
                    f"   • {recent['user_name']}: {recent['score']}/{recent['max_score']} "
                    f"({recent['percentage']:.1f}%) on {format_time_for_display(recent['completed_at'], '%m/%d %H:%M')}"
                )
            self.say()

        self.say("📊 OVERALL STATISTICS:")
        self.say(f"   Average Score Across All Quizzes: {report['average_percentage']:.1f}%")
        self.say(f"   Total Points Awarded: {report['total_points_awarded']}")
        self.say(f"   Most Active User: {report['most_active_user'] or 'None'}")
        self.say(f"   Most Popular Quiz: {report['most_popular_quiz'] or 'None'}")

    def create_quiz(self) -> None:
        self.say("\n🎯 CREATE NEW QUIZ (ADMIN ONLY)")
        self.say("================================")
        categories = self.admin_service.active_categories(self.current_user)
        if not categories.success:
            self.say(f"❌ {categories.message}")
            return
        self.say("📂 Available Categories:")
        for category in categories.data:
            self.say(f"   {category.id}. {category.name} - {category.description or ''}")
        self.say()

        title = self.ask("Enter Quiz Title: ").strip()
        if not title:
            self.say("❌ Quiz title is required!")
            return
        description = self.ask("Enter Quiz Description: ").strip()
        raw_category = self.ask("Enter Category ID: ").strip()
        if not raw_category.isdigit():
            self.say("❌ Invalid category ID!")
            return
        raw_limit = self.ask("Enter Time Limit (minutes, 0 for no limit): ").strip()
        time_limit = int(raw_limit) if raw_limit.isdigit() else 0
        is_public = self.ask("Make quiz public? (y/n): ").strip().lower().startswith("y")

        questions = []
        while True:
            self.say(f"\n❓ QUESTION {len(questions) + 1}")
            self.say("=================")
            text = self.ask("Enter question text (or 'done' to finish): ").strip()
            if not text or text.lower() == "done":
                if not questions:
                    self.say("❌ Quiz must have at least one question!")
                    continue
                break

            question = self.read_question(text)
            if question is None:
                continue
            questions.append(question)
            self.say(f"✅ Question {len(questions)} added successfully!")
            if len(questions) >= settings.question_warning_threshold:
                self.say(f"⚠️ You've added {len(questions)} questions. Consider finishing the quiz.")
            if self.ask("Add another question? (y/n): ").strip().lower().startswith("n"):
                break

        result = self.admin_service.create_quiz(QuizCreate(
            title=title,
            description=description or None,
            category_id=int(raw_category),
            time_limit=time_limit,
            is_public=is_public,
            questions=questions,
        ), self.current_user)

        if not result.success:
            self.say("\n❌ Quiz creation failed:")
            for error in result.errors:
                self.say(f"   • {error}")
            return

        quiz = result.data
        self.say("\n🎉 QUIZ CREATED SUCCESSFULLY!")
        self.say("==============================")
        self.say(f"📝 Title: {quiz.title}")
        self.say(f"❓ Questions: {len(questions)}")
        self.say(f"🎯 Total Points: {sum(max(1, q.points) for q in questions)}")
        self.say(f"⏱️ Time Limit: {f'{quiz.time_limit} minutes' if quiz.time_limit > 0 else 'No limit'}")
        self.say(f"🌍 Public: {'Yes' if quiz.is_public else 'No'}")
        self.say(f"🆔 Quiz ID: {quiz.id}")

    def read_question(self, text: str) -> Optional[QuestionCreate]:
        types = list(QuestionType)
        self.say("\nQuestion Types:")
        for number, question_type in enumerate(types, start=1):
            self.say(f"{number}. {question_type.label}")
        raw_type = self.ask(f"Select question type (1-{len(types)}): ").strip()
        if not raw_type.isdigit() or not 1 <= int(raw_type) <= len(types):
            self.say("❌ Invalid question type!")
            return None
        question_type = types[int(raw_type) - 1]

        raw_points = self.ask("Enter points for this question (default 1): ").strip()
        points = int(raw_points) if raw_points.isdigit() and int(raw_points) >= 1 else 1

        options: List[str] = []
        correct: List[int] = []
        if question_type == QuestionType.TRUE_FALSE:
            answer = self.ask("Is the correct answer True or False? (t/f): ").strip().lower()
            correct = [0] if answer.startswith("t") else [1] if answer.startswith("f") else []
        elif question_type.has_options:
            raw_count = self.ask(f"How many options? ({settings.min_options}-{settings.max_options}): ").strip()
            count = int(raw_count) if raw_count.isdigit() else 4
            if not settings.min_options <= count <= settings.max_options:
                count = 4
            options = [self.ask(f"Enter option {i + 1}: ") for i in range(count)]
            if question_type == QuestionType.SINGLE_CHOICE:
                raw_correct = self.ask("Which option is correct? (enter number): ")
            else:
                raw_correct = self.ask("Which options are correct? (enter numbers separated by commas): ")
            correct = sorted({int(p.strip()) - 1 for p in raw_correct.split(",") if p.strip().isdigit()})
        else:
            self.say("ℹ️ Short answer question created. Answers will be manually reviewed.")

        question = QuestionCreate(text=text, question_type=question_type, points=points,
                                  options=options, correct_options=correct)
        errors = question.validate_fields()
        if errors:
            for error in errors:
                self.say(f"❌ {error}")
            return None
        return question
