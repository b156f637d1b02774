import os
from pathlib import Path
from dotenv import load_dotenv

BASE_DIR = Path(__file__).resolve().parents[2]  # repository root
env_path = BASE_DIR / ".env"
load_dotenv(dotenv_path=env_path)


def _as_bool(value: str) -> bool:
    return value.strip().lower() in ("1", "true", "yes", "on")


class Settings:
    DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./regit.db")
    SQL_ECHO = _as_bool(os.getenv("SQL_ECHO", "false"))
    RUN_MIGRATIONS = _as_bool(os.getenv("RUN_MIGRATIONS", "true"))

    # OAuth provider credentials
    OAUTH_KEY = os.getenv("OAUTH_KEY", "")
    OAUTH_SECRET = os.getenv("OAUTH_SECRET", "")
    OAUTH_CALLBACK_BASE_URL = os.getenv("OAUTH_CALLBACK_BASE_URL", "http://127.0.0.1:3388")
    OAUTH_HTTP_TIMEOUT = float(os.getenv("OAUTH_HTTP_TIMEOUT", 10))

    # Cross-site session cookie
    SESSION_COOKIE_NAME = os.getenv("SESSION_COOKIE_NAME", "session_id")
    SESSION_COOKIE_DOMAIN = os.getenv("SESSION_COOKIE_DOMAIN") or None
    SESSION_COOKIE_SAMESITE = os.getenv("SESSION_COOKIE_SAMESITE", "none").lower()
    SESSION_COOKIE_SECURE = _as_bool(os.getenv("SESSION_COOKIE_SECURE", "false"))
    SESSION_EXPIRE_MIN = int(os.getenv("SESSION_EXPIRE_MIN", 1440))

    CORS_ORIGINS = [o.strip() for o in os.getenv("CORS_ORIGINS", "http://localhost:5173").split(",") if o.strip()]
    DEFAULT_REDIRECT = os.getenv("DEFAULT_REDIRECT", "/profile")

    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
    HOST = os.getenv("HOST", "0.0.0.0")
    PORT = int(os.getenv("PORT", 3388))

settings = Settings()
