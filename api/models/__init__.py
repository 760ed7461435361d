"""Pydantic models."""
from api.models.sessions import AnswerSubmit, PageChange, SessionCreate

__all__ = [
    "AnswerSubmit",
    "PageChange",
    "SessionCreate",
]
