"""Validation utilities."""
from fastapi import HTTPException


def validate_id(name: str, value: str) -> str:
    """Validate an opaque hex identifier such as a session id."""
    if not isinstance(value, str):
        raise HTTPException(status_code=400, detail=f"{name} is required")
    cleaned = value.strip()
    if not cleaned:
        raise HTTPException(status_code=400, detail=f"{name} is required")
    if not all(ch in "0123456789abcdef" for ch in cleaned.lower()):
        raise HTTPException(status_code=400, detail=f"Invalid {name}")
    return cleaned
