"""Service layer for the question bank."""
import logging
import threading
from pathlib import Path

from fastapi import HTTPException

from api import config
from bank_loader import QuestionBankLoader
from core.errors import BankValidationError
from models import QuestionBank

logger = logging.getLogger(__name__)

_bank: QuestionBank | None = None
_bank_lock = threading.Lock()


def load_bank_file(path: Path | None = None) -> QuestionBank:
    """Load and validate the bank file, replacing the cached bank."""
    global _bank
    path = path or config.BANK_PATH
    loader = QuestionBankLoader(path)
    bank = loader.load()
    for line in loader.logs:
        logger.info(line)
    with _bank_lock:
        _bank = bank
    return bank


def set_bank(bank: QuestionBank | None) -> None:
    """Install an already loaded bank (None forgets it)."""
    global _bank
    with _bank_lock:
        _bank = bank


def get_bank() -> QuestionBank:
    """Get the cached bank, loading it on first use."""
    if _bank is not None:
        return _bank
    try:
        return load_bank_file()
    except BankValidationError as e:
        logger.error(f"Failed to load question bank: {e}")
        raise HTTPException(status_code=503, detail="Question bank not available")
