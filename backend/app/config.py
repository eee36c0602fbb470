"""
Application settings
Read from environment variables (a .env file is loaded if present)
"""
import os
from pathlib import Path
from dotenv import load_dotenv

# Load the .env file
load_dotenv()

APP_DIR = Path(__file__).resolve().parent

# Zone whose wall clock defines "now" for the current-shift routes
SHIFT_TIMEZONE = os.getenv("SHIFT_TIMEZONE", "America/Sao_Paulo")

# Roster used when a request does not name one
DEFAULT_ROSTER = os.getenv("DEFAULT_ROSTER", "84")

# Static cycle tables
ROSTER_FILE = os.getenv("ROSTER_FILE", str(APP_DIR / "data" / "rosters.json"))

# Seconds between pushes on the live feed
REFRESH_INTERVAL = float(os.getenv("REFRESH_INTERVAL", "1.0"))

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

CORS_ORIGINS = [
    origin.strip()
    for origin in os.getenv(
        "CORS_ORIGINS",
        "http://localhost:3000,http://127.0.0.1:3000,http://localhost:5173,http://127.0.0.1:5173",
    ).split(",")
    if origin.strip()
]
