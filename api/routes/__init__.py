"""API route modules."""
from api.routes import bank, images, sessions

__all__ = ["bank", "images", "sessions"]
