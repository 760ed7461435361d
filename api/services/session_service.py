"""Service layer for in-memory quiz sessions."""
import logging
import random
import threading
import uuid
from collections import OrderedDict
from dataclasses import dataclass, field
from datetime import datetime
from fractions import Fraction

from fastapi import HTTPException

from api import config
from api.models import SessionCreate
from api.utils import utc_now, validate_id
from core.errors import (
    EmptySessionError,
    InvalidOptionError,
    NotFoundError,
    OutOfRangeError,
    QuizError,
    SessionStateError,
)
from core.sampler import sample_random, sample_section
from core.session import QuizSession
from models import PassPolicy, Question, QuestionBank

logger = logging.getLogger(__name__)


@dataclass
class SessionEntry:
    """A live session plus what is needed to sample a fresh question set."""

    session: QuizSession
    mode: str
    section: str | None
    filter_text: str | None
    count: int
    require_non_empty: bool
    started_at: datetime = field(default_factory=utc_now)


_sessions: "OrderedDict[str, SessionEntry]" = OrderedDict()
_sessions_lock = threading.Lock()
_rng = random.Random()


def http_error(error: QuizError) -> HTTPException:
    """Map an engine error to the HTTP error shown to the renderer."""
    if isinstance(error, NotFoundError):
        return HTTPException(status_code=404, detail=str(error))
    if isinstance(error, (InvalidOptionError, OutOfRangeError, EmptySessionError)):
        return HTTPException(status_code=400, detail=str(error))
    if isinstance(error, SessionStateError):
        return HTTPException(status_code=409, detail=str(error))
    return HTTPException(status_code=400, detail=str(error))


def build_policy(request: SessionCreate) -> PassPolicy:
    """Pick the pass policy; random tests default to fixed, sections to proportional."""
    kind = request.policy or ("fixed" if request.mode == "random" else "proportional")
    if kind == "fixed":
        max_errors = request.maxErrors
        return PassPolicy.fixed(config.FIXED_MAX_ERRORS if max_errors is None else max_errors)
    if request.ratio is None:
        return PassPolicy.proportional(config.PROPORTIONAL_RATIO)
    try:
        return PassPolicy.proportional(Fraction(request.ratio.strip()))
    except (ValueError, ZeroDivisionError):
        raise HTTPException(status_code=400, detail=f"Invalid ratio: {request.ratio}")


def sample_questions(bank: QuestionBank, entry: SessionEntry) -> list[Question]:
    if entry.mode == "section":
        return sample_section(
            bank, entry.section or "", entry.filter_text, entry.require_non_empty
        )
    return sample_random(bank, entry.count, _rng, entry.require_non_empty)


def create_session(bank: QuestionBank, request: SessionCreate) -> tuple[str, SessionEntry]:
    """Sample questions for ``request`` and register a new active session."""
    if request.mode == "section" and not request.section:
        raise HTTPException(status_code=400, detail="Section is required")

    timer = config.TIMER_SECONDS if request.timerSeconds is None else request.timerSeconds
    session = QuizSession(
        policy=build_policy(request),
        page_size=request.pageSize or config.QUESTIONS_PER_PAGE,
        timer_seconds=timer or None,
    )
    entry = SessionEntry(
        session=session,
        mode=request.mode,
        section=request.section,
        filter_text=request.filterText,
        count=config.RANDOM_TEST_SIZE if request.count is None else request.count,
        require_non_empty=request.requireNonEmpty,
    )
    try:
        session.start_session(sample_questions(bank, entry))
    except QuizError as e:
        raise http_error(e)

    session_id = uuid.uuid4().hex
    with _sessions_lock:
        _sessions[session_id] = entry
        while len(_sessions) > max(config.MAX_ACTIVE_SESSIONS, 1):
            old_id, old_entry = _sessions.popitem(last=False)
            old_entry.session.disable_timer()
            logger.info(f"Evicted session {old_id}")
    logger.info(f"Created {request.mode} session {session_id}")
    return session_id, entry


def get_session(session_id: str) -> SessionEntry:
    session_id = validate_id("sessionId", session_id)
    with _sessions_lock:
        entry = _sessions.get(session_id)
    if entry is None:
        raise HTTPException(status_code=404, detail="Session not found")
    return entry


def regenerate_session(bank: QuestionBank, entry: SessionEntry) -> None:
    """New test with the same settings and a freshly sampled question set."""
    try:
        entry.session.regenerate(sample_questions(bank, entry))
        entry.started_at = utc_now()
    except QuizError as e:
        raise http_error(e)


def delete_session(session_id: str) -> None:
    session_id = validate_id("sessionId", session_id)
    with _sessions_lock:
        entry = _sessions.pop(session_id, None)
    if entry is None:
        raise HTTPException(status_code=404, detail="Session not found")
    entry.session.disable_timer()


def clear_sessions() -> None:
    """Drop every session and stop their timers."""
    with _sessions_lock:
        entries = list(_sessions.values())
        _sessions.clear()
    for entry in entries:
        entry.session.disable_timer()
