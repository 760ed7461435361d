"""Scoring of a session against a pass policy."""
from __future__ import annotations

from typing import List

from core.errors import NotFoundError
from models import AnswerKey, AnswerStatus, PassPolicy, Question, ScoreSummary, SessionState


def classify(state: SessionState, question: Question) -> AnswerStatus:
    answer = state.answers.get(question.key)
    if answer is None:
        return AnswerStatus.UNANSWERED
    if answer == question.correct_answer:
        return AnswerStatus.CORRECT
    return AnswerStatus.INCORRECT


def score(state: SessionState, policy: PassPolicy) -> ScoreSummary:
    """
    Count correct, wrong and unanswered questions and apply ``policy``.

    Pure: does not look at ``results_revealed`` and never mutates state.
    """
    correct = wrong = unanswered = 0
    for question in state.questions:
        status = classify(state, question)
        if status is AnswerStatus.CORRECT:
            correct += 1
        elif status is AnswerStatus.INCORRECT:
            wrong += 1
        else:
            unanswered += 1

    total = len(state.questions)
    error_count = wrong + unanswered
    max_errors = policy.max_errors_for(total)
    return ScoreSummary(
        total=total,
        correct=correct,
        wrong=wrong,
        unanswered=unanswered,
        percentage=100 * correct / total if total > 0 else 0.0,
        error_count=error_count,
        max_errors_allowed=max_errors,
        passed=error_count <= max_errors,
    )


def answer_status(state: SessionState, key: AnswerKey) -> AnswerStatus:
    """Status shown next to one question; ``pending`` until results are revealed."""
    found = state.find_question(key)
    if found is None:
        raise NotFoundError(f"Question {key.section}/{key.question_id} is not in this session")
    if not state.results_revealed:
        return AnswerStatus.PENDING
    return classify(state, found[1])


def missed_questions(state: SessionState) -> List[Question]:
    """Wrong or unanswered questions, in session order."""
    return [q for q in state.questions if classify(state, q) is not AnswerStatus.CORRECT]
