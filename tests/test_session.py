import pytest

from core.errors import InvalidOptionError, NotFoundError, OutOfRangeError, SessionStateError
from core.sampler import sample_random
from core.session import QuizSession, go_to_page, record_answer, start_session
from factories import FIXED_FIVE, make_question, make_state
from models import AnswerKey, AnswerStatus, SessionState, SessionStatus


class FakeCountdown:
    instances: list["FakeCountdown"] = []

    def __init__(self, on_tick):
        self.on_tick = on_tick
        self.started = False
        self.cancelled = False
        FakeCountdown.instances.append(self)

    def start(self) -> None:
        self.started = True

    def cancel(self) -> None:
        self.cancelled = True


@pytest.fixture(autouse=True)
def _reset_fake_countdowns():
    FakeCountdown.instances = []
    yield


def _questions(count: int):
    return [make_question("A", i) for i in range(1, count + 1)]


def _session(count: int = 24, **kwargs) -> QuizSession:
    session = QuizSession(FIXED_FIVE, page_size=10, countdown_factory=FakeCountdown, **kwargs)
    session.start_session(_questions(count))
    return session


def test_start_session_resets_everything() -> None:
    state = make_state(3)
    state.answers[AnswerKey("A", 1)] = "a"
    state.results_revealed = True
    state.current_page = 2

    start_session(state, _questions(5), time_limit=60)

    assert len(state.questions) == 5
    assert state.answers == {}
    assert state.results_revealed is False
    assert state.current_page == 1
    assert state.time_remaining == 60
    assert state.status is SessionStatus.ACTIVE


def test_new_state_is_uninitialized() -> None:
    assert SessionState().status is SessionStatus.UNINITIALIZED


def test_record_answer_overwrites() -> None:
    state = make_state(3)
    key = AnswerKey("A", 2)
    assert record_answer(state, key, "a") is True
    assert record_answer(state, key, "c") is True
    assert state.answers == {key: "c"}


def test_record_answer_invalid_option_leaves_state_untouched() -> None:
    state = make_state(3)
    key = AnswerKey("A", 1)
    record_answer(state, key, "a")
    with pytest.raises(InvalidOptionError):
        record_answer(state, key, "z")
    assert state.answers == {key: "a"}


def test_record_answer_unknown_question() -> None:
    with pytest.raises(NotFoundError):
        record_answer(make_state(3), AnswerKey("B", 1), "a")


def test_record_answer_after_reveal_is_noop() -> None:
    session = _session(5)
    key = AnswerKey("A", 1)
    session.record_answer(key, "b")
    session.reveal_results()

    assert session.record_answer(key, "a") is False
    assert session.state.answers == {key: "b"}
    assert session.status is SessionStatus.REVEALED


def test_go_to_page_rejects_out_of_range() -> None:
    state = make_state(24)
    go_to_page(state, 3, 10)
    assert state.current_page == 3
    for bad in (0, 4, -1):
        with pytest.raises(OutOfRangeError):
            go_to_page(state, bad, 10)
    assert state.current_page == 3


def test_next_and_previous_page_stop_at_edges() -> None:
    session = _session(24)
    with pytest.raises(OutOfRangeError):
        session.previous_page()
    session.next_page()
    session.next_page()
    assert session.state.current_page == 3
    assert len(session.page_of()) == 4
    with pytest.raises(OutOfRangeError):
        session.next_page()


def test_empty_session_has_one_page() -> None:
    session = _session(0)
    assert session.total_pages() == 1
    session.go_to_page(1)
    assert session.page_of() == []


def test_reset_keeps_questions_and_clears_answers() -> None:
    session = _session(24)
    questions = session.state.questions
    session.record_answer(AnswerKey("A", 1), "a")
    session.go_to_page(2)
    session.reveal_results()

    session.reset_answers()

    assert session.state.questions == questions
    assert session.state.answers == {}
    assert session.state.current_page == 1
    assert session.status is SessionStatus.ACTIVE
    assert session.summary() is None


def test_regenerate_replaces_question_set() -> None:
    session = _session(5)
    session.record_answer(AnswerKey("A", 1), "a")
    session.regenerate([make_question("B", 1), make_question("B", 2)])

    assert [q.key for q in session.state.questions] == [("B", 1), ("B", 2)]
    assert session.state.answers == {}


def test_reveal_and_reset_require_started_session() -> None:
    session = QuizSession(FIXED_FIVE)
    with pytest.raises(SessionStateError):
        session.reveal_results()
    with pytest.raises(SessionStateError):
        session.reset_answers()


def test_summary_only_after_reveal() -> None:
    session = _session(10)
    assert session.summary() is None
    assert session.score().unanswered == 10
    summary = session.reveal_results()
    assert session.summary() == summary


def test_jump_to_missed_question() -> None:
    session = _session(24)
    for q in session.state.questions[:23]:
        session.record_answer(q.key, q.correct_answer)
    session.reveal_results()

    missed = session.missed_questions()
    assert [q.question_id for q in missed] == [24]
    assert session.answer_status(missed[0].key) is AnswerStatus.UNANSWERED
    assert session.locate_page(missed[0].key) == 3
    assert session.state.current_page == 1
    assert session.jump_to_question(missed[0].key) == 3
    assert session.state.current_page == 3


def test_invalid_page_size() -> None:
    with pytest.raises(ValueError):
        QuizSession(FIXED_FIVE, page_size=0)


# ---- timer ----

def test_timer_counts_down_and_reveals() -> None:
    session = _session(5, timer_seconds=3)
    countdown = FakeCountdown.instances[-1]
    assert countdown.started
    assert session.state.time_remaining == 3

    assert countdown.on_tick() is True
    assert countdown.on_tick() is True
    assert session.state.time_remaining == 1
    assert countdown.on_tick() is False

    assert session.state.time_remaining == 0
    assert session.status is SessionStatus.REVEALED
    assert countdown.cancelled


def test_manual_reveal_cancels_timer() -> None:
    session = _session(5, timer_seconds=30)
    countdown = FakeCountdown.instances[-1]
    session.reveal_results()

    assert countdown.cancelled
    assert countdown.on_tick() is False
    assert session.state.time_remaining == 30


def test_new_session_cancels_previous_timer() -> None:
    session = _session(5, timer_seconds=30)
    first = FakeCountdown.instances[-1]
    first.on_tick()
    session.regenerate(_questions(3))
    second = FakeCountdown.instances[-1]

    assert first.cancelled
    assert second is not first
    assert session.state.time_remaining == 30
    assert first.on_tick() is False
    assert session.state.time_remaining == 30


def test_disable_timer() -> None:
    session = _session(5, timer_seconds=30)
    countdown = FakeCountdown.instances[-1]
    session.disable_timer()

    assert countdown.cancelled
    assert session.state.time_remaining is None
    assert session.tick() is False
    session.reset_answers()
    assert session.state.time_remaining is None
    assert len(FakeCountdown.instances) == 1


def test_no_timer_by_default() -> None:
    session = _session(5)
    assert session.state.time_remaining is None
    assert FakeCountdown.instances == []


def test_end_to_end_unanswered_random_test(bank, rng) -> None:
    session = QuizSession(FIXED_FIVE, page_size=10)
    session.start_session(sample_random(bank, 30, rng))
    assert len({q.key for q in session.state.questions}) == 30

    summary = session.reveal_results()
    assert summary.correct == 0
    assert summary.wrong == 0
    assert summary.unanswered == 30
    assert summary.error_count == 30
    assert summary.passed is False
