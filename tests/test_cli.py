import json
from pathlib import Path

import pytest

import cli
from core.session import QuizSession
from factories import FIXED_FIVE, make_question, raw_bank


def _scripted(commands: list[str]):
    queue = list(commands)

    def read(_prompt: str) -> str:
        if not queue:
            raise EOFError
        return queue.pop(0)

    return read


def test_run_quiz_answer_reveal_and_jump() -> None:
    questions = [make_question("A", i) for i in range(1, 13)]
    session = QuizSession(FIXED_FIVE, page_size=10)
    output: list[str] = []

    summary = cli.run_quiz(
        session,
        lambda: questions,
        read=_scripted(["a 1 a", "a 2 b", "p 9", "r", "a 1 b", "m", "j 12", "q"]),
        write=output.append,
    )

    assert summary is not None
    assert (summary.correct, summary.wrong, summary.unanswered) == (1, 1, 10)
    assert summary.passed is False
    assert any(line.startswith("Error: Page 9") for line in output)
    assert "Results are revealed; answers are locked." in output
    assert "Missed: 2, 3, 4, 5, 6, 7, 8, 9, 10, 11, 12" in output
    assert session.state.current_page == 2


def test_run_quiz_reports_bad_input() -> None:
    session = QuizSession(FIXED_FIVE, page_size=10)
    output: list[str] = []
    cli.run_quiz(
        session,
        lambda: [make_question("A", 1)],
        read=_scripted(["a 5 a", "a 1 z", "zzz"]),
        write=output.append,
    )
    assert "Error: No question number 5" in output
    assert any(line.startswith("Error: Option 'z'") for line in output)
    assert "Unknown command: zzz" in output


def _bank_file(tmp_path: Path) -> Path:
    path = tmp_path / "quizData.json"
    path.write_text(json.dumps(raw_bank()), encoding="utf-8")
    return path


def test_sections_command(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    assert cli.main(["sections", str(_bank_file(tmp_path))]) == 0
    assert capsys.readouterr().out.splitlines() == ["Tartufi: 2", "Legislazione: 1"]


def test_study_command_json(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    assert cli.main(["study", str(_bank_file(tmp_path)), "--search", "BLACK", "--json"]) == 0
    data = json.loads(capsys.readouterr().out)
    assert [q["questionId"] for q in data] == [2]
    assert data[0]["correctAnswer"] == "b"


def test_invalid_bank_exit_code(tmp_path: Path) -> None:
    assert cli.main(["sections", str(tmp_path / "missing.json")]) == 2


def test_build_policy_defaults() -> None:
    args = cli.parse_args(["quiz", "bank.json"])
    assert cli.build_policy(args).kind == "fixed"
    args = cli.parse_args(["quiz", "bank.json", "--section", "Tartufi"])
    assert cli.build_policy(args).kind == "proportional"
    args = cli.parse_args(["quiz", "bank.json", "--ratio", "1/5"])
    assert cli.build_policy(args).max_errors_for(10) == 2


@pytest.mark.parametrize(
    "extra",
    [["--ratio", "x/y"], ["--ratio", "1/0"], ["--ratio=-1/2"], ["--max-errors", "-3"]],
)
def test_quiz_rejects_bad_policy(
    tmp_path: Path, capsys: pytest.CaptureFixture[str], extra: list[str]
) -> None:
    assert cli.main(["quiz", str(_bank_file(tmp_path)), *extra]) == 2
    assert capsys.readouterr().out.startswith("Invalid pass policy:")


def test_quiz_rejects_bad_page_size(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    assert cli.main(["quiz", str(_bank_file(tmp_path)), "--page-size", "0"]) == 2
    assert capsys.readouterr().out == "Invalid page size: 0\n"
