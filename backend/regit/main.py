# regit/main.py
"""
FastAPI application entry point.
Builds the database engine, session stores, OAuth providers and routes, and
ties their lifecycle to the application's startup/shutdown.
"""

from __future__ import annotations

import logging
import os
import subprocess
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Iterable, Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import PlainTextResponse

from regit.clients.oauth_providers import GoogleProvider, OAuthProvider, ProviderRegistry
from regit.config import Settings, settings as default_settings
from regit.database import create_db_engine, create_session_factory, log_where_am_i, redacted_dsn
from regit.routers import auth, health, messages, profile
from regit.services.auth_service import AuthService
from regit.services.oauth_client import OAuthClient
from regit.services.session_store import CookieConfig, SessionStore

# Configure logging level from environment variable
logging.basicConfig(level=default_settings.LOG_LEVEL)
logger = logging.getLogger(__name__)

BACKEND_DIR = Path(__file__).resolve().parents[1]

# ---- Session scopes ----
USER_SCOPE = "user"
NEXT_SCOPE = "next"
OAUTH_SCOPE = "oauth"


def run_migrations(cfg: Settings) -> None:
    """Run Alembic database migrations on startup."""
    env = dict(os.environ, DATABASE_URL=cfg.DATABASE_URL)
    logger.warning(f"Running Alembic migrations against {redacted_dsn(cfg.DATABASE_URL)}...")
    subprocess.check_call(
        ["alembic", "-c", str(BACKEND_DIR / "alembic.ini"), "upgrade", "head"],
        env=env,
    )
    logger.warning("Migrations complete.")


def build_providers(cfg: Settings) -> ProviderRegistry:
    registry = ProviderRegistry()
    if cfg.OAUTH_KEY and cfg.OAUTH_SECRET:
        base = cfg.OAUTH_CALLBACK_BASE_URL.rstrip("/")
        registry.register(GoogleProvider(
            cfg.OAUTH_KEY,
            cfg.OAUTH_SECRET,
            f"{base}/auth/callback/{GoogleProvider.name}",
            timeout=cfg.OAUTH_HTTP_TIMEOUT,
        ))
    else:
        logger.warning("OAUTH_KEY/OAUTH_SECRET not set; google login is disabled")
    return registry


def build_session_stores(cfg: Settings) -> dict:
    expire = cfg.SESSION_EXPIRE_MIN
    return {
        USER_SCOPE: SessionStore(USER_SCOPE, CookieConfig(
            name=cfg.SESSION_COOKIE_NAME,
            samesite=cfg.SESSION_COOKIE_SAMESITE,
            secure=cfg.SESSION_COOKIE_SECURE,
            domain=cfg.SESSION_COOKIE_DOMAIN,
            expire_minutes=expire,
        )),
        NEXT_SCOPE: SessionStore(NEXT_SCOPE, CookieConfig(name="session_next", expire_minutes=expire)),
        OAUTH_SCOPE: SessionStore(OAUTH_SCOPE, CookieConfig(name="_oauth_session", expire_minutes=expire)),
    }


def create_app(
    cfg: Optional[Settings] = None,
    providers: Optional[Iterable[OAuthProvider]] = None,
) -> FastAPI:
    """
    Build the application. `providers`, when given, replaces the providers
    configured from the environment.
    """
    cfg = cfg or default_settings

    engine = create_db_engine(cfg.DATABASE_URL, echo=cfg.SQL_ECHO)
    registry = ProviderRegistry(providers) if providers is not None else build_providers(cfg)
    stores = build_session_stores(cfg)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if cfg.RUN_MIGRATIONS:
            run_migrations(cfg)
        log_where_am_i(engine)
        yield
        registry.close()
        engine.dispose()

    app = FastAPI(title="regit API", version="0.1.0", lifespan=lifespan)

    app.state.settings = cfg
    app.state.engine = engine
    app.state.session_factory = create_session_factory(engine)
    app.state.providers = registry
    app.state.session_stores = stores
    app.state.auth_service = AuthService(
        user_store=stores[USER_SCOPE],
        next_store=stores[NEXT_SCOPE],
        oauth_client=OAuthClient(registry, stores[OAUTH_SCOPE]),
        default_redirect=cfg.DEFAULT_REDIRECT,
    )

    # ---- CORS Middleware ----
    # Credentialed requests from the configured frontend origins
    app.add_middleware(
        CORSMiddleware,
        allow_origins=cfg.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["Origin", "Content-Type", "Accept"],
    )

    # ---- API Routes ----
    app.include_router(health.router)
    app.include_router(auth.router)
    app.include_router(profile.router)
    app.include_router(messages.router)

    @app.get("/", response_class=PlainTextResponse)
    def root():
        return "Hello, World!"

    return app


def run() -> None:
    import uvicorn

    uvicorn.run(create_app(), host=default_settings.HOST, port=default_settings.PORT)


if __name__ == "__main__":
    run()
