"""Errors raised by the quiz engine and the bank loader."""
from __future__ import annotations


class QuizError(Exception):
    """Base class for recoverable engine errors."""


class NotFoundError(QuizError):
    """Unknown section, or a question key outside the current session."""


class InvalidOptionError(QuizError):
    """Answer option not declared by the addressed question."""


class OutOfRangeError(QuizError):
    """Page number outside ``[1, total_pages]``."""


class EmptySessionError(QuizError):
    """Sampling produced no questions although a non-empty set was required."""


class SessionStateError(QuizError):
    """Operation not valid for the current session lifecycle state."""


class BankValidationError(ValueError):
    """Malformed question bank, detected once at load time."""
