"""
record_authz.api.app

FastAPI app factory for the record authorization service.

Responsibilities:
- Build the FastAPI application and register routers/middleware.
- Wire the policy registry, authorizer and identity-state provider once, before serving.
- Initialize and dispose shared infrastructure (DB engine/session factory).
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from record_authz import __version__
from record_authz.api.routers.admin import router as admin_router
from record_authz.api.routers.dev_auth import router as dev_auth_router
from record_authz.api.routers.forecasts import router as forecasts_router
from record_authz.api.routers.health import router as health_router
from record_authz.auth.app_policies import build_app_registry
from record_authz.auth.evaluator import Authorizer
from record_authz.auth.identities import get_identity
from record_authz.auth.models import ANONYMOUS
from record_authz.auth.state import AuthenticationStateProvider
from record_authz.db.init_db import init_db
from record_authz.db.repositories.forecasts import ForecastRepo, seed_forecasts
from record_authz.db.session import create_engine, create_sessionmaker
from record_authz.observability.logging import configure_logging, get_logger
from record_authz.observability.middleware import RequestContextMiddleware
from record_authz.settings import Settings

log = get_logger(__name__)


def create_app(*, settings: Settings) -> FastAPI:
    configure_logging(
        service_name=settings.service_name,
        level=settings.log_level,
        json=settings.env != "dev",
    )

    # Registry is validated and frozen here, so misconfiguration fails before startup.
    authorizer = Authorizer(build_app_registry())
    initial = get_identity(settings.initial_identity) if settings.initial_identity else ANONYMOUS
    auth_state = AuthenticationStateProvider(initial=initial)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        log.info("startup", env=settings.env, policies=authorizer.registry.policy_names())
        engine = create_engine(settings)
        app.state.engine = engine
        app.state.sessionmaker = create_sessionmaker(engine)
        if settings.env in ("dev", "test"):
            await init_db(engine)
            await _seed(app, settings.seed_forecast_count)
        try:
            yield
        finally:
            await engine.dispose()
            log.info("shutdown")

    app = FastAPI(
        title="Record Authorization Service",
        version=__version__,
        docs_url="/docs",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.authorizer = authorizer
    app.state.auth_state = auth_state

    app.add_middleware(RequestContextMiddleware)
    app.include_router(health_router, tags=["health"])
    app.include_router(dev_auth_router)
    app.include_router(forecasts_router)
    app.include_router(admin_router)

    return app


async def _seed(app: FastAPI, count: int) -> None:
    async with app.state.sessionmaker() as session:
        repo = ForecastRepo(session)
        if count and await repo.count() == 0:
            await seed_forecasts(repo, count)
            await session.commit()
            log.info("forecasts_seeded", count=count)


# --- Module Notes -----------------------------------------------------------
# This is the composition root: policies/handlers are registered exactly once here
# (via `build_app_registry`) and treated as read-only afterwards.
