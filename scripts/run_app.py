import argparse
import os
from pathlib import Path

import uvicorn


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Tartufi Quiz server")
    parser.add_argument("--host", default="127.0.0.1")
    parser.add_argument("--port", type=int, default=8000)
    parser.add_argument("--bank", default="data/quizData.json", help="Question bank JSON")
    parser.add_argument("--images-dir", default="data/images")
    parser.add_argument("--timer", type=int, default=None, help="Session time limit in seconds")
    return parser.parse_args()


def main() -> None:
    args = parse_args()
    # api.config reads these at import time, so they must be set before uvicorn imports the app
    os.environ.setdefault("QUIZ_BANK_PATH", str(Path(args.bank)))
    os.environ.setdefault("QUIZ_IMAGES_DIR", str(Path(args.images_dir)))
    if args.timer is not None:
        os.environ.setdefault("TIMER_SECONDS", str(args.timer))

    uvicorn.run(
        "api.app:app",
        host=args.host,
        port=args.port,
        log_level="info",
    )


if __name__ == "__main__":
    main()
