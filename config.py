"""Configuration for the Talent Scout API."""
from __future__ import annotations

import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

_root = Path(__file__).parent

# Database
DATABASE_URL = os.getenv(
    "DATABASE_URL",
    f"sqlite+aiosqlite:///{_root / 'talent.db'}",
)


def _parse_bool(value: str) -> bool:
    return value.strip().lower() in ("1", "true", "yes", "on")


def _parse_origins(value: str) -> list[str]:
    if not value:
        return ["*"]
    return [x.strip() for x in value.split(",") if x.strip()]


# Web auth (JWT in session cookie)
JWT_SECRET = os.getenv("JWT_SECRET", "change-me-in-production-use-long-random-string")
JWT_ALGORITHM = "HS256"
SESSION_MAX_AGE_HOURS = int(os.getenv("SESSION_MAX_AGE_HOURS", "24"))
SESSION_COOKIE_NAME = os.getenv("SESSION_COOKIE_NAME", "talent_session")
COOKIE_SECURE = _parse_bool(os.getenv("COOKIE_SECURE", "false"))
BCRYPT_ROUNDS = int(os.getenv("BCRYPT_ROUNDS", "12"))

# Uploaded media (served under /uploads)
UPLOAD_DIR = Path(os.getenv("UPLOAD_DIR", str(_root / "uploads")))
MAX_VIDEO_UPLOAD_MB = int(os.getenv("MAX_VIDEO_UPLOAD_MB", "200"))

CORS_ORIGINS = _parse_origins(os.getenv("CORS_ORIGINS", ""))
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

# Insert demo accounts, trials and videos on startup when the database is empty
SEED_DEMO_DATA = _parse_bool(os.getenv("SEED_DEMO_DATA", "false"))
