"""Health check endpoint."""

import logging

from fastapi import APIRouter, Depends, Request
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from src.db.database import get_db

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/health")
def health_check(request: Request, db: Session = Depends(get_db)) -> dict[str, str]:
    """Return application, save database and game state health."""
    game = getattr(request.app.state, "game_service", None)
    game_status = "loaded" if game is not None and game.active_pet else "not_loaded"
    try:
        db.execute(text("SELECT 1"))
        return {"status": "ok", "database": "connected", "game": game_status}
    except SQLAlchemyError:
        logger.warning("Save database health check failed")
        return {"status": "error", "database": "disconnected", "game": game_status}
