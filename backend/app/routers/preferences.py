"""API routes for the persisted display preference."""

import logging
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from database.config import get_db
from app.models.schemas import ThemePreference
from app.services.crud import get_theme, set_theme


logger = logging.getLogger("shiftrota.api")

router = APIRouter(prefix="/api/preferences", tags=["preferences"])


@router.get("/theme", response_model=ThemePreference)
async def read_theme(db: Session = Depends(get_db)):
    """Stored display theme (light when never set)."""
    try:
        return ThemePreference(theme=get_theme(db))
    except SQLAlchemyError as e:
        logger.warning("Reading theme failed: %s", e)
        raise HTTPException(status_code=503, detail="Preference store unavailable")


@router.put("/theme", response_model=ThemePreference)
async def update_theme(request: ThemePreference, db: Session = Depends(get_db)):
    """Persist the display theme."""
    try:
        return ThemePreference(theme=set_theme(db, request.theme))
    except SQLAlchemyError as e:
        db.rollback()
        logger.warning("Saving theme failed: %s", e)
        raise HTTPException(status_code=503, detail="Preference store unavailable")
