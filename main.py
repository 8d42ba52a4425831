"""
Hashed-identity authentication service — application entry point.
"""

from __future__ import annotations

import logging
import sys
from contextlib import asynccontextmanager
from typing import Optional

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from api.auth import router as auth_router
from api.middleware import register_exception_handlers, register_middleware
from auth.service import AuthService
from auth.sessions import InMemorySessionRegistry
from config.settings import Settings, config
from database.session import async_session_factory
from database.user_store import UserStore

logging.basicConfig(
    level=logging.DEBUG if config.debug else logging.INFO,
    format="%(asctime)s  %(levelname)-8s  %(name)s — %(message)s",
    stream=sys.stdout,
)
for _noisy in ("aiosqlite", "sqlalchemy.engine"):
    logging.getLogger(_noisy).setLevel(logging.WARNING)
logger = logging.getLogger(__name__)


def warn_if_fallback_salt(settings: Settings) -> bool:
    """Log a warning when identifier hashing runs on the built-in salt."""
    if settings.uses_fallback_salt:
        logger.warning(
            "Using fallback IDENTIFIER_SALT. Set IDENTIFIER_SALT (or EMAIL_SALT) in production! "
            "Stored identifier hashes are only as private as this salt."
        )
        return True
    return False


def build_auth_service(settings: Settings = config) -> AuthService:
    return AuthService(
        store=UserStore(async_session_factory),
        sessions=InMemorySessionRegistry(),
        identifier_salt=settings.identifier_salt,
    )


def create_app(service: Optional[AuthService] = None, settings: Settings = config) -> FastAPI:
    auth_service = service or build_auth_service(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        await auth_service.store.create_schema()
        warn_if_fallback_salt(settings)
        logger.info("Database: %s", auth_service.store.engine.url.render_as_string(hide_password=True))
        logger.info("Security: deterministic email hashing + random password salting")
        logger.info("Application ready to accept requests.")
        yield
        sessions = auth_service.sessions
        if hasattr(sessions, "clear"):
            sessions.clear()
        await auth_service.store.dispose()

    app = FastAPI(
        title="Secure Authentication API",
        version="1.0.0",
        description="Registration and login without storing plaintext emails or passwords.",
        lifespan=lifespan,
    )
    app.state.auth_service = auth_service

    # CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization"],
    )

    register_middleware(app)
    register_exception_handlers(app)

    # Routes
    app.include_router(auth_router)

    return app


app = create_app()

if __name__ == "__main__":
    uvicorn.run(
        "main:app",
        host=config.host,
        port=config.port,
        reload=config.debug,
        log_level="debug" if config.debug else "info",
    )
