"""Utility modules."""
from api.utils.file_utils import safe_asset_path
from api.utils.json_utils import json_dump, json_load
from api.utils.time_utils import elapsed_seconds, utc_now
from api.utils.validation import validate_id

__all__ = [
    "safe_asset_path",
    "json_dump",
    "json_load",
    "elapsed_seconds",
    "utc_now",
    "validate_id",
]
