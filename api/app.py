"""Main FastAPI application with modularized routes."""
import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from api.config import BANK_PATH
from api.routes import bank, images, sessions
from api.services.bank_service import load_bank_file
from api.services.session_service import clear_sessions
from core.errors import BankValidationError
from core.logging_setup import setup_console_logging

setup_console_logging()
logger = logging.getLogger(__name__)

app = FastAPI(title="Tartufi Quiz API")

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)


# Startup events
@app.on_event("startup")
def startup_events() -> None:
    """Load the question bank once; a broken bank is reported, not fatal."""
    try:
        load_bank_file(BANK_PATH)
    except BankValidationError as e:
        logger.error(f"Question bank not loaded: {e}")


@app.on_event("shutdown")
def shutdown_events() -> None:
    """Stop all session timers."""
    clear_sessions()


# Include routers
app.include_router(bank.router)
app.include_router(sessions.router)
app.include_router(images.router)
