from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from datetime import timedelta

from fastapi import Depends, FastAPI

from app.db.init_db import init_db
from app.db.session import create_db_engine, create_session_factory
from app.errors import register_error_handlers
from app.logging_config import configure_app_logging
from app.routers import admin, admin_suggestions, auth, departments, health, suggestions
from app.security.config import load_security_config
from app.security.dependencies import enforce_security
from app.security.rate_limit import SlidingWindowRateLimiter
from app.security.tokens import TokenService
from app.settings import Settings, get_settings

logger = logging.getLogger(__name__)


def create_app(settings: Settings | None = None, *, init_database: bool = True) -> FastAPI:
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # Startup
        configure_app_logging(settings.log_level)
        logger.info("App startup beginning")

        if init_database:
            init_db(engine, settings)
            logger.info("Database initialized (tables ensured + seed if needed)")

        yield
        # Shutdown
        engine.dispose()

    # Global dependency: rate limiting, token validation and role gates for every route.
    app = FastAPI(
        title="Student Suggestion API",
        dependencies=[Depends(enforce_security)],
        lifespan=lifespan,
    )

    # Process-wide collaborators, built once and owned by this app instance.
    engine = create_db_engine(settings.resolved_db_url())
    app.state.db_engine = engine
    app.state.session_factory = create_session_factory(engine)

    security_config = load_security_config(settings.resolved_security_config_path())
    app.state.security_config = security_config
    app.state.token_service = TokenService(
        settings.resolved_jwt_secret(),
        ttl=timedelta(hours=settings.token_ttl_hours),
    )
    app.state.rate_limiter = SlidingWindowRateLimiter(
        limit=security_config.rate_limit.limit,
        window_seconds=security_config.rate_limit.window_seconds,
    )
    logger.info("Loaded security config: %s", settings.resolved_security_config_path())

    register_error_handlers(app)

    app.include_router(health.router)
    app.include_router(departments.router)
    app.include_router(suggestions.router)
    app.include_router(auth.router)
    app.include_router(admin_suggestions.router)
    app.include_router(admin.router)

    return app


app = create_app()
