from __future__ import annotations

import enum
import math
from dataclasses import dataclass, field
from fractions import Fraction
from typing import Dict, Mapping, NamedTuple, Optional, Tuple


class AnswerKey(NamedTuple):
    section: str
    question_id: int


@dataclass(frozen=True)
class Question:
    section: str
    question_id: int
    text: str
    options: Mapping[str, str]
    correct_answer: str
    image: Optional[str] = None  # opaque name, resolved by the renderer

    @property
    def key(self) -> AnswerKey:
        return AnswerKey(self.section, self.question_id)


class AnswerStatus(str, enum.Enum):
    PENDING = "pending"
    UNANSWERED = "unanswered"
    CORRECT = "correct"
    INCORRECT = "incorrect"


class SessionStatus(str, enum.Enum):
    UNINITIALIZED = "uninitialized"
    ACTIVE = "active"
    REVEALED = "revealed"


@dataclass(frozen=True)
class PassPolicy:
    """
    How many errors (wrong + unanswered) a test may contain and still pass.

    ``fixed`` allows a constant number of errors regardless of length;
    ``proportional`` scales the allowance with the number of questions.
    """

    max_errors: Optional[int] = None
    ratio: Optional[Fraction] = None

    def __post_init__(self) -> None:
        if (self.max_errors is None) == (self.ratio is None):
            raise ValueError("PassPolicy needs exactly one of max_errors or ratio")
        if self.max_errors is not None and self.max_errors < 0:
            raise ValueError("max_errors must be >= 0")
        if self.ratio is not None and self.ratio < 0:
            raise ValueError("ratio must be >= 0")

    @classmethod
    def fixed(cls, max_errors: int) -> "PassPolicy":
        return cls(max_errors=int(max_errors))

    @classmethod
    def proportional(cls, ratio: Fraction | float | str) -> "PassPolicy":
        if isinstance(ratio, float):
            value = Fraction(ratio).limit_denominator(1000)
        else:
            value = Fraction(ratio)
        return cls(ratio=value)

    @property
    def kind(self) -> str:
        return "fixed" if self.max_errors is not None else "proportional"

    def max_errors_for(self, total: int) -> int:
        if self.max_errors is not None:
            return self.max_errors
        return math.ceil(total * self.ratio)


@dataclass
class SessionState:
    questions: Tuple[Question, ...] = ()
    answers: Dict[AnswerKey, str] = field(default_factory=dict)
    results_revealed: bool = False
    current_page: int = 1
    time_remaining: Optional[int] = None
    started: bool = False

    @property
    def status(self) -> SessionStatus:
        if not self.started:
            return SessionStatus.UNINITIALIZED
        if self.results_revealed:
            return SessionStatus.REVEALED
        return SessionStatus.ACTIVE

    def find_question(self, key: AnswerKey) -> Optional[Tuple[int, Question]]:
        for index, question in enumerate(self.questions):
            if question.key == key:
                return index, question
        return None


@dataclass(frozen=True)
class ScoreSummary:
    total: int
    correct: int
    wrong: int
    unanswered: int
    percentage: float
    error_count: int
    max_errors_allowed: int
    passed: bool


QuestionBank = Dict[str, Tuple[Question, ...]]
