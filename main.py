import os
from pathlib import Path

import uvicorn

from api.app import app


def _default_bank_path() -> Path:
    return Path(os.environ.get("QUIZ_BANK_PATH", Path.cwd() / "data" / "quizData.json"))


if __name__ == "__main__":
    os.environ.setdefault("QUIZ_BANK_PATH", str(_default_bank_path()))
    uvicorn.run(app, host="127.0.0.1", port=8000)
