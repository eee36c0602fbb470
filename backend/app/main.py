"""FastAPI application entry point."""

import logging
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager

from app.config import CORS_ORIGINS, LOG_LEVEL
from app.routers import preferences, shifts
from app.services.rosters import get_registry
from database.config import init_db


logging.basicConfig(
    level=LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger("shiftrota.app")

DB_AVAILABLE = False


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifecycle"""
    global DB_AVAILABLE

    # Rosters are required: a bad roster file stops startup here
    get_registry()

    # The preference store is optional
    try:
        init_db()
        DB_AVAILABLE = True
        logger.info("Database initialized successfully")
    except Exception as e:
        DB_AVAILABLE = False
        logger.warning("Database initialization failed: %s", e)
        logger.warning("Running without preference storage")
    yield


app = FastAPI(
    title="Shift Rota API",
    description="Which rotating crew is on duty, for any instant or date",
    version="1.0.0",
    lifespan=lifespan,
)

# CORS middleware for frontend integration
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(shifts.router)
app.include_router(preferences.router)


@app.get("/")
async def root():
    """Health check endpoint."""
    return {"status": "ok", "service": "Shift Rota API", "db_available": DB_AVAILABLE}


@app.get("/health")
async def health():
    """Health check endpoint."""
    return {"status": "healthy", "db_available": DB_AVAILABLE}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("app.main:app", host="0.0.0.0", port=8000)
