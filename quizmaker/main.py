import logging
import sys

from quizmaker.cli import QuizApplication
from quizmaker.config import settings
from quizmaker.database import DataStore
from quizmaker.errors import PersistenceError
from quizmaker.seed import seed_store
from quizmaker.services.admin import AdminService
from quizmaker.services.auth import AuthService
from quizmaker.services.quizzes import QuizService


def configure_logging():
    logging.basicConfig(
        level=getattr(logging, settings.effective_log_level, logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


def build_store(data_file=None, persist=None) -> DataStore:
    """Create the data store, loading saved data or falling back to seed data"""
    persist = settings.persist_data if persist is None else persist
    store = DataStore(data_file=data_file or settings.data_file, autosave=persist)

    if persist:
        try:
            store.load()
        except PersistenceError as e:
            logging.error(f"{e.detail}. Starting with fresh data.")
            store = DataStore(data_file=store.data_file, autosave=persist)

    if store.is_empty():
        logging.info("Creating sample data")
        seed_store(store)
        store.commit()
    return store


def build_app(store: DataStore, **kwargs) -> QuizApplication:
    return QuizApplication(
        auth_service=AuthService(store),
        quiz_service=QuizService(store),
        admin_service=AdminService(store),
        **kwargs,
    )


def main() -> int:
    configure_logging()
    try:
        store = build_store()
        app = build_app(store)
        app.run()
        store.commit()
        return 0
    except Exception as e:
        logging.exception("Unhandled application error")
        print(f"❌ Application error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
