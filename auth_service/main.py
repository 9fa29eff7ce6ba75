"""FastAPI application wiring for the auth service."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Response
from fastapi.middleware.cors import CORSMiddleware
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest
from psycopg_pool import ConnectionPool

from .api.errors import install_error_handlers
from .api.middleware import register_middleware
from .api.routes import router
from .config import Settings, get_settings
from .domain.service import AuthService, ProfileService
from .repository import AccountRepository
from .security.passwords import PasswordHasher
from .security.redis_rate_limiter import build_rate_limiter

logger = logging.getLogger(__name__)


def create_app(settings: Settings | None = None) -> FastAPI:
    """Build the application with its middleware stack and routes."""
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Initialise shared resources (Postgres pool, services) for the app lifecycle."""
        pool = ConnectionPool(settings.database_url, open=False)
        pool.open()
        repository = AccountRepository(pool)
        repository.ensure_schema()
        hasher = PasswordHasher(settings.bcrypt_rounds)
        app.state.pool = pool
        app.state.auth_service = AuthService(repository, hasher)
        app.state.profile_service = ProfileService(repository, hasher)
        app.state.rate_limiter = build_rate_limiter(settings)
        logger.info("%s %s ready", settings.app_name, settings.version)
        try:
            yield
        finally:
            pool.close()

    app = FastAPI(
        title=settings.app_name,
        version=settings.version,
        description="Account registration, login and profile API.",
        lifespan=lifespan,
    )
    install_error_handlers(app)
    register_middleware(app)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(settings.cors_allow_origins),
        allow_credentials="*" not in settings.cors_allow_origins,
        allow_methods=["*"],
        allow_headers=["*"],
        max_age=600,
    )

    @app.get("/healthz", tags=["health"])
    def healthz() -> dict[str, str]:
        """Return a minimal readiness indicator used by orchestration systems."""
        return {"status": "ok"}

    @app.get("/metrics", include_in_schema=False)
    def metrics() -> Response:
        return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)

    app.include_router(router)
    return app


app = create_app()
