"""FastAPI application factory.

Learn: App factory pattern — create_app() returns a configured FastAPI
instance. Everything with process lifetime (settings, the database
engine, the token codec) is built here and hung off app.state, so
handlers receive it through dependencies instead of module globals.
Lifespan manages startup/shutdown (schema, Redis, engine disposal).
"""

from contextlib import asynccontextmanager
from typing import Optional

import structlog
from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.exc import SQLAlchemyError

from gamehound import __version__
from gamehound.api import api_router
from gamehound.auth.jwt import TokenCodec
from gamehound.config import Settings, settings as default_settings
from gamehound.db.engine import build_engine, build_session_factory, init_schema
from gamehound.db.redis import close_redis, init_redis
from gamehound.errors import (
    GameHoundError,
    gamehound_error_handler,
    request_validation_handler,
    storage_error_handler,
)
from gamehound.middleware.rate_limit import RateLimitMiddleware
from gamehound.middleware.request_id import RequestIdMiddleware
from gamehound.middleware.security import SecurityHeadersMiddleware

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown lifecycle.

    Learn: Anything before `yield` runs at startup, after `yield` runs
    at shutdown.
    """
    app_settings: Settings = app.state.settings
    logger.info(
        "gamehound.starting",
        version=__version__,
        environment=app_settings.environment,
        port=app_settings.port,
    )

    if app_settings.auto_create_schema:
        await init_schema(app.state.engine)
        logger.info("gamehound.schema_ready")

    try:
        await init_redis(app_settings.redis_url)
        logger.info("gamehound.redis_connected", url=app_settings.redis_url)
    except Exception as e:
        # Redis is optional — the app works without rate limiting
        logger.warning("gamehound.redis_unavailable", error=str(e))

    yield

    logger.info("gamehound.shutdown")
    await close_redis()
    await app.state.engine.dispose()


def create_app(app_settings: Optional[Settings] = None) -> FastAPI:
    """Build and return the FastAPI application."""
    app_settings = app_settings or default_settings

    app = FastAPI(
        title="GameHound",
        description="Project tracking for game-development teams",
        version=__version__,
        lifespan=lifespan,
    )

    app.state.settings = app_settings
    app.state.engine = build_engine(app_settings.database_url, echo=app_settings.debug)
    app.state.session_factory = build_session_factory(app.state.engine)
    app.state.token_codec = TokenCodec.from_settings(app_settings)

    app.add_exception_handler(GameHoundError, gamehound_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(SQLAlchemyError, storage_error_handler)

    # ── Middleware stack ──────────────────────────────────────
    # Note: Starlette middleware executes in reverse order of registration.
    # Request flow: CORS → RateLimit → Security → RequestId → handler
    app.add_middleware(RequestIdMiddleware)
    app.add_middleware(SecurityHeadersMiddleware)
    app.add_middleware(
        RateLimitMiddleware,
        default_rpm=app_settings.rate_limit_rpm,
        auth_rpm=app_settings.rate_limit_auth_rpm,
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=app_settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(api_router)

    return app


# Default app instance (used by uvicorn: gamehound.main:app)
app = create_app()
