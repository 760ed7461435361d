"""Builds the ordered question sets a session is started with."""
from __future__ import annotations

import logging
import random
from typing import Iterable, List, Mapping, Optional, Sequence

from core.errors import EmptySessionError, NotFoundError
from models import Question

log = logging.getLogger(__name__)


def list_sections(bank: Mapping[str, Sequence[Question]]) -> list[tuple[str, int]]:
    """Section names in bank order with their question counts."""
    return [(name, len(questions)) for name, questions in bank.items()]


def flatten_bank(bank: Mapping[str, Sequence[Question]]) -> List[Question]:
    questions: List[Question] = []
    for section_questions in bank.values():
        questions.extend(section_questions)
    return questions


def fisher_yates_shuffle(items: list, rng: random.Random) -> None:
    """Shuffle ``items`` in place; every permutation is equally likely."""
    for i in range(len(items) - 1, 0, -1):
        j = rng.randint(0, i)
        items[i], items[j] = items[j], items[i]


def matches_filter(question: Question, filter_text: Optional[str]) -> bool:
    """
    Case-insensitive substring match on the question text or any option.
    A blank filter matches everything.
    """
    if not filter_text or not filter_text.strip():
        return True
    needle = filter_text.lower()
    if needle in question.text.lower():
        return True
    return any(needle in option.lower() for option in question.options.values())


def _section_questions(
    bank: Mapping[str, Sequence[Question]], section: str
) -> Sequence[Question]:
    if section not in bank:
        raise NotFoundError(f"Section not found: {section}")
    return bank[section]


def sample_random(
    bank: Mapping[str, Sequence[Question]],
    count: int,
    rng: Optional[random.Random] = None,
    require_non_empty: bool = False,
) -> List[Question]:
    """
    Shuffle the whole bank and keep the first ``count`` questions.

    Returns fewer questions when the bank is smaller than ``count`` and an
    empty list for ``count <= 0``.
    """
    rng = rng or random.Random()
    pool = flatten_bank(bank)
    fisher_yates_shuffle(pool, rng)
    selected = pool[: max(count, 0)]
    log.debug("Sampled %d of %d questions (requested %d)", len(selected), len(pool), count)
    if require_non_empty and not selected:
        raise EmptySessionError("No questions available for a random test")
    return selected


def sample_section(
    bank: Mapping[str, Sequence[Question]],
    section: str,
    filter_text: Optional[str] = None,
    require_non_empty: bool = False,
) -> List[Question]:
    """All questions of one section in bank order, optionally filtered."""
    selected = [q for q in _section_questions(bank, section) if matches_filter(q, filter_text)]
    log.debug("Section %r: %d questions after filter %r", section, len(selected), filter_text)
    if require_non_empty and not selected:
        raise EmptySessionError(f"No questions in section {section!r} match the filter")
    return selected


def browse_questions(
    bank: Mapping[str, Sequence[Question]],
    section: Optional[str] = None,
    search: Optional[str] = None,
) -> List[Question]:
    """Study listing: every section (or one) filtered by ``search``."""
    sources: Iterable[Sequence[Question]]
    if section:
        sources = [_section_questions(bank, section)]
    else:
        sources = bank.values()
    return [q for questions in sources for q in questions if matches_filter(q, search)]
