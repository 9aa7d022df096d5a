"""
record_authz.api.deps

FastAPI dependency wiring for the API layer.

Responsibilities:
- Provide dependency functions for DB sessions and services.
- Encapsulate app.state access patterns (sessionmaker).
"""

from __future__ import annotations

from collections.abc import AsyncIterator

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from record_authz.auth.deps import get_authorizer
from record_authz.auth.evaluator import Authorizer
from record_authz.services.forecast_service import ForecastService


def sessionmaker_from_app(request: Request) -> async_sessionmaker[AsyncSession]:
    # The sessionmaker is created in the app lifespan (`record_authz.api.app.create_app`).
    return request.app.state.sessionmaker  # type: ignore[attr-defined]


async def db_session(
    session_factory: async_sessionmaker[AsyncSession] = Depends(sessionmaker_from_app),
) -> AsyncIterator[AsyncSession]:
    async with session_factory() as session:
        yield session


def forecast_service(
    session: AsyncSession = Depends(db_session),
    authorizer: Authorizer = Depends(get_authorizer),
) -> ForecastService:
    return ForecastService(session=session, authorizer=authorizer)
