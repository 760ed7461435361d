"""Quiz session endpoints."""
from fastapi import APIRouter

from api.models import AnswerSubmit, PageChange, SessionCreate
from api.services.bank_service import get_bank
from api.services.session_service import (
    SessionEntry,
    create_session,
    delete_session,
    get_session,
    http_error,
    regenerate_session,
)
from api.utils import elapsed_seconds
from core.errors import QuizError
from models import AnswerKey
from serialization import serialize_page, serialize_score, serialize_session

router = APIRouter(prefix="/api/sessions", tags=["sessions"])


def _snapshot(session_id: str, entry: SessionEntry) -> dict[str, object]:
    return serialize_session(
        session_id,
        entry.session,
        mode=entry.mode,
        section=entry.section,
        startedAt=entry.started_at.isoformat(),
        elapsedSeconds=elapsed_seconds(entry.started_at),
    )


@router.post("")
def start_session(payload: SessionCreate) -> dict[str, object]:
    """Sample a question set and start a new session."""
    session_id, entry = create_session(get_bank(), payload)
    return {
        "session": _snapshot(session_id, entry),
        "view": serialize_page(entry.session),
    }


@router.get("/{session_id}")
def get_session_state(session_id: str) -> dict[str, object]:
    """Get session snapshot (answers, status, score once revealed)."""
    entry = get_session(session_id)
    return _snapshot(session_id, entry)


@router.delete("/{session_id}")
def end_session(session_id: str) -> dict[str, str]:
    """Discard a session and stop its timer."""
    delete_session(session_id)
    return {"status": "deleted"}


@router.get("/{session_id}/page")
def get_page(session_id: str) -> dict[str, object]:
    """Get questions visible on the current page."""
    return serialize_page(get_session(session_id).session)


@router.put("/{session_id}/page")
def change_page(session_id: str, payload: PageChange) -> dict[str, object]:
    """Move to another page; out-of-range pages are rejected."""
    session = get_session(session_id).session
    try:
        session.go_to_page(payload.page)
    except QuizError as e:
        raise http_error(e)
    return serialize_page(session)


@router.post("/{session_id}/answers")
def submit_answer(session_id: str, payload: AnswerSubmit) -> dict[str, object]:
    """Record or replace the answer for one question."""
    session = get_session(session_id).session
    key = AnswerKey(payload.section, payload.questionId)
    try:
        applied = session.record_answer(key, payload.answer)
    except QuizError as e:
        raise http_error(e)
    return {
        "status": "recorded" if applied else "ignored",
        "section": key.section,
        "questionId": key.question_id,
        "answer": session.state.answers.get(key),
    }


@router.post("/{session_id}/reveal")
def reveal_results(session_id: str) -> dict[str, object]:
    """Lock answers and return the score."""
    entry = get_session(session_id)
    try:
        entry.session.reveal_results()
    except QuizError as e:
        raise http_error(e)
    return _snapshot(session_id, entry)


@router.post("/{session_id}/reset")
def reset_answers(session_id: str) -> dict[str, object]:
    """Retry the same questions with a clean answer sheet."""
    entry = get_session(session_id)
    try:
        entry.session.reset_answers()
    except QuizError as e:
        raise http_error(e)
    return _snapshot(session_id, entry)


@router.post("/{session_id}/regenerate")
def regenerate(session_id: str) -> dict[str, object]:
    """Start a new test with the same settings and freshly sampled questions."""
    entry = get_session(session_id)
    regenerate_session(get_bank(), entry)
    return {
        "session": _snapshot(session_id, entry),
        "view": serialize_page(entry.session),
    }


@router.post("/{session_id}/timer/disable")
def disable_timer(session_id: str) -> dict[str, object]:
    """Stop the countdown for this session."""
    entry = get_session(session_id)
    entry.session.disable_timer()
    return _snapshot(session_id, entry)


@router.get("/{session_id}/score")
def get_score(session_id: str) -> dict[str, object]:
    """Get the score; null until results are revealed."""
    session = get_session(session_id).session
    return {"revealed": session.state.results_revealed, "score": serialize_score(session.summary())}


@router.get("/{session_id}/locate/{section}/{question_id}")
def locate_question(
    session_id: str,
    section: str,
    question_id: int,
    jump: bool = False,
) -> dict[str, object]:
    """Find the page of a question; ``jump=true`` also moves the view there."""
    session = get_session(session_id).session
    key = AnswerKey(section, question_id)
    try:
        page = session.jump_to_question(key) if jump else session.locate_page(key)
    except QuizError as e:
        raise http_error(e)
    return {"section": section, "questionId": question_id, "page": page}
