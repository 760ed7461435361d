"""Question bank endpoints (section list and study mode)."""
from fastapi import APIRouter, Query

from api.services.bank_service import get_bank
from api.services.session_service import http_error
from core.errors import NotFoundError
from core.sampler import browse_questions
from serialization import serialize_metadata, serialize_question

router = APIRouter(prefix="/api", tags=["bank"])


@router.get("/sections")
def list_sections() -> dict[str, object]:
    """List sections with their question counts."""
    return serialize_metadata(get_bank())


@router.get("/study")
def study_questions(
    section: str | None = Query(None),
    search: str | None = Query(None),
) -> dict[str, object]:
    """Browse questions with their correct answers, optionally filtered."""
    try:
        questions = browse_questions(get_bank(), section, search)
    except NotFoundError as e:
        raise http_error(e)
    return {
        "section": section,
        "search": search,
        "count": len(questions),
        "questions": [
            serialize_question(question, include_answer=True) for question in questions
        ],
    }
