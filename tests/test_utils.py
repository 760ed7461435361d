from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest
from fastapi import HTTPException

from api.utils import file_utils, json_utils, time_utils, validation


def test_safe_asset_path_allows_nested(tmp_path: Path) -> None:
    base_dir = tmp_path / "images"
    base_dir.mkdir()
    resolved = file_utils.safe_asset_path(base_dir, "sections/truffle.png")
    assert resolved == (base_dir / "sections" / "truffle.png").resolve()


def test_safe_asset_path_blocks_traversal(tmp_path: Path) -> None:
    base_dir = tmp_path / "images"
    base_dir.mkdir()
    with pytest.raises(HTTPException):
        file_utils.safe_asset_path(base_dir, "../secret.txt")


def test_json_dump_keeps_unicode() -> None:
    payload = {"text": "Qual è il tartufo più pregiato?", "count": 2}
    dumped = json_utils.json_dump(payload)
    assert "più" in dumped
    assert json_utils.json_load(dumped) == payload


def test_elapsed_seconds() -> None:
    start = datetime(2024, 1, 1, 12, 0, 0, tzinfo=timezone.utc)
    assert time_utils.elapsed_seconds(start, start + timedelta(seconds=90.7)) == 90
    assert time_utils.elapsed_seconds(start, start - timedelta(seconds=5)) == 0
    assert time_utils.utc_now().tzinfo is not None


def test_validate_id() -> None:
    assert validation.validate_id("sessionId", " abc123 ") == "abc123"
    with pytest.raises(HTTPException):
        validation.validate_id("sessionId", "")
    with pytest.raises(HTTPException):
        validation.validate_id("sessionId", "../bad")
