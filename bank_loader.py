from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Mapping, Union

from core.errors import BankValidationError
from models import Question, QuestionBank

log = logging.getLogger(__name__)

BankSource = Union[Path, str, Mapping[str, Any]]


class QuestionBankLoader:
    """
    Reads a question bank in the quiz JSON layout and validates it once:

        {"<section>": {"questions": {"<id>": {
            "text": "...", "image": "img.png",
            "options": {"a": "...", "b": "..."}, "correctAnswer": "a"}}}}

    Question ids may be strings as long as they convert to integers.
    """

    def __init__(self, source: BankSource):
        self.source = source
        self.logs: list[str] = []  # short summary for the CLI

    def _read_raw(self) -> Mapping[str, Any]:
        if isinstance(self.source, Mapping):
            return self.source
        path = Path(self.source)
        if not path.exists():
            raise BankValidationError(f"Bank file not found: {path}")
        log.info("Reading bank file: %s", path)
        try:
            raw = json.loads(path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as e:
            raise BankValidationError(f"Bank file is not valid JSON: {e}") from e
        if not isinstance(raw, dict):
            raise BankValidationError("Bank root must be an object of sections")
        return raw

    def _parse_question(self, section: str, raw_id: Any, data: Any) -> Question:
        where = f"{section}/{raw_id}"
        try:
            question_id = int(raw_id)
        except (TypeError, ValueError):
            raise BankValidationError(f"{where}: question id is not an integer") from None
        if not isinstance(data, dict):
            raise BankValidationError(f"{where}: question must be an object")

        text = data.get("text")
        if not isinstance(text, str) or not text.strip():
            raise BankValidationError(f"{where}: question text is required")

        options = data.get("options")
        if not isinstance(options, dict) or len(options) < 2:
            raise BankValidationError(f"{where}: at least two options are required")
        options = {str(k): str(v) for k, v in options.items()}

        correct = data.get("correctAnswer")
        if correct is None or str(correct) not in options:
            raise BankValidationError(f"{where}: correctAnswer {correct!r} is not an option key")

        image = data.get("image")
        if image is not None and not isinstance(image, str):
            raise BankValidationError(f"{where}: image must be a file name")

        return Question(
            section=section,
            question_id=question_id,
            text=text,
            options=options,
            correct_answer=str(correct),
            image=image or None,
        )

    def load(self) -> QuestionBank:
        log.info("=== BANK LOAD START ===")
        self.logs.clear()
        raw = self._read_raw()

        bank: QuestionBank = {}
        for section, section_data in raw.items():
            if not isinstance(section_data, dict) or not isinstance(
                section_data.get("questions"), dict
            ):
                raise BankValidationError(f"{section}: missing 'questions' object")

            questions = []
            seen: set[int] = set()
            for raw_id, data in section_data["questions"].items():
                question = self._parse_question(section, raw_id, data)
                if question.question_id in seen:
                    raise BankValidationError(
                        f"{section}/{raw_id}: duplicate question id {question.question_id}"
                    )
                seen.add(question.question_id)
                questions.append(question)

            bank[section] = tuple(questions)
            log.debug("Section %r: %d questions", section, len(questions))
            self.logs.append(f"Section {section}: {len(questions)} questions")

        total = sum(len(q) for q in bank.values())
        log.info("Sections: %d, questions: %d", len(bank), total)
        self.logs.append(f"Questions loaded: {total}")
        log.info("=== BANK LOAD END ===")
        return bank


def load_bank(source: BankSource) -> QuestionBank:
    return QuestionBankLoader(source).load()
