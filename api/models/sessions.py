"""Session-related Pydantic models."""
from typing import Literal

from pydantic import BaseModel, Field


class SessionCreate(BaseModel):
    """Model for starting a new quiz session.

    ``random`` mode samples ``count`` questions from the whole bank,
    ``section`` mode takes every question of ``section`` matching
    ``filterText``. Unset policy fields fall back to configuration.
    """

    mode: Literal["random", "section"] = "random"
    section: str | None = None
    filterText: str | None = None
    count: int | None = Field(None, ge=0)
    policy: Literal["fixed", "proportional"] | None = None
    maxErrors: int | None = Field(None, ge=0)
    ratio: str | None = None
    timerSeconds: int | None = Field(None, ge=0)
    pageSize: int | None = Field(None, ge=1, le=100)
    requireNonEmpty: bool = False


class AnswerSubmit(BaseModel):
    """Model for recording an answer."""

    section: str = Field(..., min_length=1)
    questionId: int
    answer: str = Field(..., min_length=1)


class PageChange(BaseModel):
    """Model for changing the visible page."""

    page: int
