import argparse
import logging
from pathlib import Path
from typing import Callable, List

from api import config
from api.utils import json_dump
from bank_loader import QuestionBankLoader
from core.errors import BankValidationError, QuizError
from core.pagination import page_bounds
from core.sampler import browse_questions, list_sections, sample_random, sample_section
from core.session import QuizSession
from core.logging_setup import setup_console_logging
from models import PassPolicy, Question, ScoreSummary
from serialization import serialize_question

setup_console_logging(logging.WARNING)

HELP = (
    "Commands: a <number> <option>  answer | p <page>  go to page | n / b  next / back\n"
    "          r  reveal results | x  retry same test | g  new test | j <number>  jump to question\n"
    "          m  list missed questions | h  help | q  quit"
)


def parse_args(argv: List[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Take multiple-choice quizzes from a question bank")
    sub = parser.add_subparsers(dest="command", required=True)

    sections = sub.add_parser("sections", help="List sections and question counts")
    sections.add_argument("bank", type=Path, help="Path to question bank JSON")

    study = sub.add_parser("study", help="Print questions with their answers")
    study.add_argument("bank", type=Path)
    study.add_argument("--section", type=str, default=None)
    study.add_argument("--search", type=str, default=None)
    study.add_argument("--json", action="store_true", help="Print JSON instead of text")

    quiz = sub.add_parser("quiz", help="Take an interactive quiz")
    quiz.add_argument("bank", type=Path)
    quiz.add_argument("--section", type=str, default=None, help="Section test instead of random")
    quiz.add_argument("--filter", type=str, default=None, help="Text filter for section tests")
    quiz.add_argument("--count", type=int, default=config.RANDOM_TEST_SIZE)
    quiz.add_argument("--page-size", type=int, default=config.QUESTIONS_PER_PAGE)
    quiz.add_argument("--max-errors", type=int, default=None, help="Fixed pass policy")
    quiz.add_argument("--ratio", type=str, default=None, help="Proportional pass policy, e.g. 4/30")
    return parser.parse_args(argv)


def format_question(question: Question, number: int, selected: str | None, revealed: bool) -> str:
    lines = [f"{number}. [{question.section}] {question.text}"]
    if question.image:
        lines.append(f"   (image: {serialize_question(question)['imageFallback']})")
    for key, text in question.options.items():
        mark = ">" if key == selected else " "
        suffix = ""
        if revealed and key == question.correct_answer:
            suffix = "  <- correct"
        lines.append(f"  {mark} {key}) {text}{suffix}")
    return "\n".join(lines)


def format_page(session: QuizSession) -> str:
    with session.locked():
        return _format_page(session)


def _format_page(session: QuizSession) -> str:
    state = session.state
    first, last = page_bounds(state, session.page_size)
    header = (
        f"Page {state.current_page}/{session.total_pages()} - "
        f"questions {first}-{last} of {len(state.questions)}"
    )
    body = [
        format_question(q, first + i, state.answers.get(q.key), state.results_revealed)
        for i, q in enumerate(session.page_of())
    ]
    return "\n\n".join([header, *body])


def format_score(summary: ScoreSummary) -> str:
    verdict = "PASSED" if summary.passed else "FAILED"
    return (
        f"{verdict}: {summary.correct} correct, {summary.wrong} wrong, "
        f"{summary.unanswered} unanswered ({summary.percentage:.1f}%). "
        f"Errors {summary.error_count}/{summary.max_errors_allowed} allowed."
    )


def build_policy(args: argparse.Namespace) -> PassPolicy:
    if args.max_errors is not None:
        return PassPolicy.fixed(args.max_errors)
    if args.ratio is not None:
        return PassPolicy.proportional(args.ratio)
    if args.section:
        return PassPolicy.proportional(config.PROPORTIONAL_RATIO)
    return PassPolicy.fixed(config.FIXED_MAX_ERRORS)


def run_quiz(
    session: QuizSession,
    sample: Callable[[], List[Question]],
    read: Callable[[str], str] = input,
    write: Callable[[str], None] = print,
) -> ScoreSummary | None:
    """Interactive loop; returns the last revealed score (None if never revealed)."""
    session.start_session(sample())
    write(HELP)
    write(format_page(session))
    last_summary = None

    while True:
        try:
            raw = read("> ").strip()
        except EOFError:
            break
        if not raw:
            continue
        cmd, *rest = raw.split()
        try:
            if cmd == "q":
                break
            elif cmd == "h":
                write(HELP)
                continue
            elif cmd == "a" and len(rest) == 2:
                question = _question_by_number(session, rest[0])
                if not session.record_answer(question.key, rest[1]):
                    write("Results are revealed; answers are locked.")
                continue
            elif cmd == "p" and len(rest) == 1:
                session.go_to_page(int(rest[0]))
            elif cmd == "n":
                session.next_page()
            elif cmd == "b":
                session.previous_page()
            elif cmd == "r":
                last_summary = session.reveal_results()
                write(format_score(last_summary))
            elif cmd == "x":
                session.reset_answers()
            elif cmd == "g":
                session.regenerate(sample())
            elif cmd == "j" and len(rest) == 1:
                session.jump_to_question(_question_by_number(session, rest[0]).key)
            elif cmd == "m":
                missed = session.missed_questions()
                numbers = [str(session.state.questions.index(q) + 1) for q in missed]
                write("Missed: " + (", ".join(numbers) or "none"))
                continue
            else:
                write(f"Unknown command: {raw}")
                continue
        except (QuizError, ValueError) as e:
            write(f"Error: {e}")
            continue
        write(format_page(session))

    session.disable_timer()
    return last_summary


def _question_by_number(session: QuizSession, raw: str) -> Question:
    number = int(raw)
    questions = session.state.questions
    if not 1 <= number <= len(questions):
        raise ValueError(f"No question number {number}")
    return questions[number - 1]


def main(argv: List[str] | None = None) -> int:
    args = parse_args(argv)
    try:
        bank = QuestionBankLoader(args.bank).load()
    except BankValidationError as e:
        print(f"Invalid question bank: {e}")
        return 2

    if args.command == "sections":
        for name, count in list_sections(bank):
            print(f"{name}: {count}")
        return 0

    if args.command == "study":
        try:
            questions = browse_questions(bank, args.section, args.search)
        except QuizError as e:
            print(f"Error: {e}")
            return 1
        if args.json:
            print(json_dump([serialize_question(q, include_answer=True) for q in questions]))
        else:
            for number, question in enumerate(questions, start=1):
                print(format_question(question, number, None, revealed=True))
                print()
        return 0

    if args.section and args.section not in bank:
        print(f"Section not found: {args.section}")
        return 1

    def sample() -> List[Question]:
        if args.section:
            return sample_section(bank, args.section, args.filter)
        return sample_random(bank, args.count)

    try:
        policy = build_policy(args)
    except (ValueError, ZeroDivisionError) as e:
        print(f"Invalid pass policy: {e}")
        return 2
    if args.page_size <= 0:
        print(f"Invalid page size: {args.page_size}")
        return 2

    session = QuizSession(policy, page_size=args.page_size)
    run_quiz(session, sample)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
