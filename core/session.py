"""Session state mutators and the ``QuizSession`` owned by a renderer."""
from __future__ import annotations

import logging
import threading
from typing import Callable, ContextManager, List, Optional, Sequence

from core import pagination, scorer
from core.countdown import Countdown
from core.errors import InvalidOptionError, NotFoundError, OutOfRangeError, SessionStateError
from models import (
    AnswerKey,
    AnswerStatus,
    PassPolicy,
    Question,
    ScoreSummary,
    SessionState,
    SessionStatus,
)

log = logging.getLogger(__name__)


# ---- state mutators (validate first, then mutate) ----

def start_session(
    state: SessionState,
    questions: Sequence[Question],
    time_limit: Optional[int] = None,
) -> None:
    state.questions = tuple(questions)
    state.answers = {}
    state.results_revealed = False
    state.current_page = 1
    state.time_remaining = time_limit if time_limit and time_limit > 0 else None
    state.started = True


def record_answer(state: SessionState, key: AnswerKey, option_key: str) -> bool:
    """
    Store ``option_key`` as the answer for ``key``, replacing any earlier one.

    Returns False without touching the answers once results are revealed.
    """
    found = state.find_question(key)
    if found is None:
        raise NotFoundError(f"Question {key.section}/{key.question_id} is not in this session")
    question = found[1]
    if option_key not in question.options:
        raise InvalidOptionError(
            f"Option {option_key!r} is not valid for question {key.section}/{key.question_id}"
        )
    if state.results_revealed:
        log.debug("Ignoring answer for %s/%s: results already revealed", *key)
        return False
    state.answers[key] = option_key
    return True


def reveal_results(state: SessionState) -> None:
    state.results_revealed = True


def reset_answers(state: SessionState, time_limit: Optional[int] = None) -> None:
    """Retry the same questions: answers cleared, back to the first page."""
    state.answers = {}
    state.results_revealed = False
    state.current_page = 1
    state.time_remaining = time_limit if time_limit and time_limit > 0 else None


def go_to_page(state: SessionState, page: int, page_size: int) -> None:
    last = pagination.total_pages(state, page_size)
    if not 1 <= page <= last:
        raise OutOfRangeError(f"Page {page} is outside 1..{last}")
    state.current_page = page


# ---- session object ----

class QuizSession:
    """
    One test attempt: the question set, the answers, the pass policy, the
    page size and an optional countdown.

    Every public method takes the session lock, the countdown ticks on a
    timer thread.
    """

    def __init__(
        self,
        policy: PassPolicy,
        page_size: int = 10,
        timer_seconds: Optional[int] = None,
        countdown_factory: Callable[[Callable[[], bool]], Countdown] = Countdown,
    ):
        if page_size <= 0:
            raise ValueError("page_size must be positive")
        self.policy = policy
        self.page_size = page_size
        self.timer_seconds = timer_seconds if timer_seconds and timer_seconds > 0 else None
        self.state = SessionState()
        self._countdown_factory = countdown_factory
        self._countdown: Optional[Countdown] = None
        self._generation = 0
        self._lock = threading.RLock()

    # ---- lifecycle ----

    @property
    def status(self) -> SessionStatus:
        return self.state.status

    def locked(self) -> ContextManager[bool]:
        """The session lock, for reading several fields of ``state`` consistently."""
        return self._lock

    def start_session(self, questions: Sequence[Question]) -> None:
        with self._lock:
            self._cancel_countdown()
            start_session(self.state, questions, self.timer_seconds)
            log.info(
                "Session started with %d questions (%s policy)",
                len(self.state.questions),
                self.policy.kind,
            )
            self._start_countdown()

    def regenerate(self, questions: Sequence[Question]) -> None:
        """New test: a freshly sampled question set replaces the current one."""
        self.start_session(questions)

    def reset_answers(self) -> None:
        with self._lock:
            self._require_started("reset")
            self._cancel_countdown()
            reset_answers(self.state, self.timer_seconds)
            self._start_countdown()

    def record_answer(self, key: AnswerKey, option_key: str) -> bool:
        with self._lock:
            return record_answer(self.state, key, option_key)

    def reveal_results(self) -> ScoreSummary:
        with self._lock:
            self._require_started("reveal")
            self._cancel_countdown()
            if not self.state.results_revealed:
                reveal_results(self.state)
                log.info("Results revealed")
            return scorer.score(self.state, self.policy)

    def _require_started(self, action: str) -> None:
        if self.state.status is SessionStatus.UNINITIALIZED:
            raise SessionStateError(f"Cannot {action} before a session is started")

    # ---- timer ----

    def disable_timer(self) -> None:
        with self._lock:
            self._cancel_countdown()
            self.timer_seconds = None
            self.state.time_remaining = None

    def tick(self) -> bool:
        """One second elapsed. Returns False once the countdown should stop."""
        with self._lock:
            if self.state.time_remaining is None or self.state.status is not SessionStatus.ACTIVE:
                return False
            self.state.time_remaining -= 1
            if self.state.time_remaining > 0:
                return True
            self.state.time_remaining = 0
            log.info("Time is up, revealing results")
            self._cancel_countdown()
            reveal_results(self.state)
            return False

    def _start_countdown(self) -> None:
        if self.state.time_remaining is None:
            return
        self._generation += 1
        generation = self._generation

        def on_tick() -> bool:
            with self._lock:
                if generation != self._generation:
                    return False
                return self.tick()

        self._countdown = self._countdown_factory(on_tick)
        self._countdown.start()

    def _cancel_countdown(self) -> None:
        self._generation += 1
        if self._countdown is not None:
            self._countdown.cancel()
            self._countdown = None

    # ---- navigation ----

    def go_to_page(self, page: int) -> None:
        with self._lock:
            go_to_page(self.state, page, self.page_size)

    def next_page(self) -> None:
        with self._lock:
            go_to_page(self.state, self.state.current_page + 1, self.page_size)

    def previous_page(self) -> None:
        with self._lock:
            go_to_page(self.state, self.state.current_page - 1, self.page_size)

    def total_pages(self) -> int:
        return pagination.total_pages(self.state, self.page_size)

    def page_of(self) -> List[Question]:
        with self._lock:
            return pagination.page_of(self.state, self.page_size)

    def locate_page(self, key: AnswerKey) -> int:
        with self._lock:
            return pagination.locate_page(self.state, key, self.page_size)

    def jump_to_question(self, key: AnswerKey) -> int:
        """Move the view to the page holding ``key`` and return that page."""
        with self._lock:
            page = pagination.locate_page(self.state, key, self.page_size)
            self.state.current_page = page
            return page

    # ---- results ----

    def score(self) -> ScoreSummary:
        with self._lock:
            return scorer.score(self.state, self.policy)

    def summary(self) -> Optional[ScoreSummary]:
        """Score once results are revealed, None before."""
        with self._lock:
            if not self.state.results_revealed:
                return None
            return scorer.score(self.state, self.policy)

    def answer_status(self, key: AnswerKey) -> AnswerStatus:
        with self._lock:
            return scorer.answer_status(self.state, key)

    def missed_questions(self) -> List[Question]:
        with self._lock:
            return scorer.missed_questions(self.state)
