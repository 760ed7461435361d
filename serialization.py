from __future__ import annotations

from pathlib import Path
from typing import Any, Mapping, Sequence

from core import pagination, scorer
from core.session import QuizSession
from models import Question, ScoreSummary


IMAGES_URL_PREFIX = "/images"


def image_fallback(name: str | None) -> str | None:
    if not name:
        return None
    return f"{IMAGES_URL_PREFIX}/{name}"


def image_src(
    name: str | None,
    images_dir: Path | None,
    base_url: str | None = None,
) -> str | None:
    """
    Resolve an image name for display. When the file is found in
    ``images_dir`` the direct URL (under ``base_url``) is returned,
    otherwise the ``/images/<name>`` fallback.
    """
    if not name:
        return None
    if images_dir is not None and base_url is not None:
        candidate = images_dir / name
        if candidate.is_file():
            return f"{base_url.rstrip('/')}/{Path(name).as_posix()}"
    return image_fallback(name)


def serialize_question(
    question: Question,
    number: int | None = None,
    include_answer: bool = False,
) -> dict[str, Any]:
    payload: dict[str, Any] = {
        "section": question.section,
        "questionId": question.question_id,
        "text": question.text,
        "image": question.image,
        "imageFallback": image_fallback(question.image),
        "options": dict(question.options),
    }
    if number is not None:
        payload["number"] = number
    if include_answer:
        payload["correctAnswer"] = question.correct_answer
    return payload


def serialize_score(summary: ScoreSummary | None) -> dict[str, Any] | None:
    if summary is None:
        return None
    return {
        "total": summary.total,
        "correct": summary.correct,
        "wrong": summary.wrong,
        "unanswered": summary.unanswered,
        "percentage": round(summary.percentage, 2),
        "errorCount": summary.error_count,
        "maxErrorsAllowed": summary.max_errors_allowed,
        "passed": summary.passed,
    }


def serialize_page(session: QuizSession) -> dict[str, Any]:
    with session.locked():
        return _page_payload(session)


def _page_payload(session: QuizSession) -> dict[str, Any]:
    state = session.state
    revealed = state.results_revealed
    first, last = pagination.page_bounds(state, session.page_size)
    items = []
    for offset, question in enumerate(session.page_of()):
        item = serialize_question(question, number=first + offset, include_answer=revealed)
        item["selected"] = state.answers.get(question.key)
        item["status"] = scorer.answer_status(state, question.key).value
        items.append(item)
    total_pages = session.total_pages()
    return {
        "page": state.current_page,
        "totalPages": total_pages,
        "pageSize": session.page_size,
        "firstNumber": first,
        "lastNumber": last,
        "totalQuestions": len(state.questions),
        "hasPrevious": state.current_page > 1,
        "hasNext": state.current_page < total_pages,
        "questions": items,
    }


def serialize_session(session_id: str, session: QuizSession, **extra: Any) -> dict[str, Any]:
    with session.locked():
        payload = _session_payload(session_id, session)
    payload.update(extra)
    return payload


def _session_payload(session_id: str, session: QuizSession) -> dict[str, Any]:
    state = session.state
    payload: dict[str, Any] = {
        "id": session_id,
        "status": session.status.value,
        "policy": serialize_policy(session),
        "page": state.current_page,
        "totalPages": session.total_pages(),
        "pageSize": session.page_size,
        "questionCount": len(state.questions),
        "answeredCount": len(state.answers),
        "timeRemaining": state.time_remaining,
        "answers": [
            {"section": key.section, "questionId": key.question_id, "answer": answer}
            for key, answer in state.answers.items()
        ],
        "score": serialize_score(session.summary()),
    }
    if state.results_revealed:
        payload["missed"] = [
            {"section": q.section, "questionId": q.question_id}
            for q in session.missed_questions()
        ]
    return payload


def serialize_policy(session: QuizSession) -> dict[str, Any]:
    policy = session.policy
    if policy.kind == "fixed":
        return {"kind": "fixed", "maxErrors": policy.max_errors}
    return {"kind": "proportional", "ratio": str(policy.ratio)}


def serialize_metadata(bank: Mapping[str, Sequence[Question]]) -> dict[str, Any]:
    return {
        "sections": [
            {"name": name, "questionCount": len(questions)}
            for name, questions in bank.items()
        ],
        "questionCount": sum(len(questions) for questions in bank.values()),
    }
