"""Page views over a session and the review navigator."""
from __future__ import annotations

import math
from typing import List, Tuple

from core.errors import NotFoundError
from models import AnswerKey, Question, SessionState


def _check_page_size(page_size: int) -> None:
    if page_size <= 0:
        raise ValueError("page_size must be positive")


def total_pages(state: SessionState, page_size: int) -> int:
    _check_page_size(page_size)
    return max(1, math.ceil(len(state.questions) / page_size))


def page_of(state: SessionState, page_size: int) -> List[Question]:
    _check_page_size(page_size)
    start = (state.current_page - 1) * page_size
    return list(state.questions[start:start + page_size])


def page_bounds(state: SessionState, page_size: int) -> Tuple[int, int]:
    """1-based numbers of the first and last question on the current page.

    ``(0, 0)`` for an empty session.
    """
    _check_page_size(page_size)
    total = len(state.questions)
    if total == 0:
        return 0, 0
    first = (state.current_page - 1) * page_size + 1
    return first, min(state.current_page * page_size, total)


def locate_page(state: SessionState, key: AnswerKey, page_size: int) -> int:
    """Page holding the question addressed by ``key``."""
    _check_page_size(page_size)
    found = state.find_question(key)
    if found is None:
        raise NotFoundError(f"Question {key.section}/{key.question_id} is not in this session")
    index, _ = found
    return index // page_size + 1
