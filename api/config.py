"""Application configuration and constants."""
import os
from fractions import Fraction
from pathlib import Path


def _parse_int_env(name: str, default: int) -> int:
    """Parse integer from environment variable."""
    raw = os.environ.get(name)
    if raw is None:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _parse_ratio_env(name: str, default: str) -> Fraction:
    """Parse a ratio such as ``4/30`` or ``0.2`` from environment variable."""
    raw = os.environ.get(name, default)
    try:
        return Fraction(raw.strip())
    except (ValueError, ZeroDivisionError):
        return Fraction(default)


# Question bank
BANK_PATH = Path(os.environ.get("QUIZ_BANK_PATH", Path.cwd() / "data" / "quizData.json"))
IMAGES_DIR = Path(os.environ.get("QUIZ_IMAGES_DIR", Path.cwd() / "data" / "images"))

# Sessions
QUESTIONS_PER_PAGE = _parse_int_env("QUESTIONS_PER_PAGE", 10)
RANDOM_TEST_SIZE = _parse_int_env("RANDOM_TEST_SIZE", 30)
TIMER_SECONDS = _parse_int_env("TIMER_SECONDS", 0)  # 0 disables the countdown
MAX_ACTIVE_SESSIONS = _parse_int_env("MAX_ACTIVE_SESSIONS", 1000)

# Pass policies
FIXED_MAX_ERRORS = _parse_int_env("FIXED_MAX_ERRORS", 5)
PROPORTIONAL_RATIO = _parse_ratio_env("PROPORTIONAL_RATIO", "4/30")
