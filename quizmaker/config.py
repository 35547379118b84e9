from pydantic_settings import BaseSettings
import os
from dotenv import load_dotenv

load_dotenv()

class Settings(BaseSettings):
    app_name: str = os.getenv("APP_NAME", "QuizMaker")
    debug: bool = os.getenv("DEBUG", "false").lower() == "true"
    log_level: str = os.getenv("LOG_LEVEL", "WARNING")

    # Persistence Configuration
    data_file: str = os.getenv("DATA_FILE", "quizmaker_data.json")
    persist_data: bool = os.getenv("PERSIST_DATA", "true").lower() == "true"

    # Timestamps are stored and displayed in this zone
    timezone: str = os.getenv("TIMEZONE", "Asia/Kolkata")

    # Validation limits
    min_password_length: int = int(os.getenv("MIN_PASSWORD_LENGTH", 6))
    min_options: int = 2
    max_options: int = int(os.getenv("MAX_OPTIONS", 6))
    question_warning_threshold: int = int(os.getenv("QUESTION_WARNING_THRESHOLD", 10))

    @property
    def effective_log_level(self) -> str:
        return "DEBUG" if self.debug else self.log_level.upper()

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"

settings = Settings()
