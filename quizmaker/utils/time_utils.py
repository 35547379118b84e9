from datetime import datetime
import time
import pytz

from quizmaker.config import settings

def get_local_timezone():
    return pytz.timezone(settings.timezone)

def get_local_time():
    """Get current time in the configured timezone"""
    return datetime.now(get_local_timezone())

def convert_to_local(utc_time):
    """Convert a naive UTC time to the configured timezone"""
    if utc_time.tzinfo is None:
        utc_time = utc_time.replace(tzinfo=pytz.UTC)
    return utc_time.astimezone(get_local_timezone())

def format_time_for_display(dt, fmt="%Y-%m-%d %H:%M:%S"):
    """Format datetime for display"""
    if dt is None:
        return "-"
    return dt.strftime(fmt)

def format_remaining(seconds):
    """Render seconds as MM:SS"""
    seconds = max(0, int(seconds))
    return f"{seconds // 60:02d}:{seconds % 60:02d}"


class QuizTimer:
    """Advisory deadline for a quiz run, polled between console reads.

    A time limit of 0 minutes means the quiz is untimed.
    """

    def __init__(self, time_limit_minutes: int, clock=time.monotonic):
        self.limit_seconds = max(0, time_limit_minutes) * 60
        self.clock = clock
        self.started = clock()

    @property
    def is_timed(self) -> bool:
        return self.limit_seconds > 0

    def elapsed(self) -> float:
        return self.clock() - self.started

    def remaining(self) -> float:
        if not self.is_timed:
            return float("inf")
        return self.limit_seconds - self.elapsed()

    def expired(self) -> bool:
        return self.is_timed and self.remaining() <= 0
