from .config import engine, SessionLocal, get_db, Base, init_db
from .models import SystemConfig

__all__ = [
    "engine",
    "SessionLocal",
    "get_db",
    "Base",
    "init_db",
    "SystemConfig",
]
