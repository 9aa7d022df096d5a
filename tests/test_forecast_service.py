"""
tests.test_forecast_service

Forecast service: policy enforcement against stored record snapshots.
"""

from __future__ import annotations

import random
import uuid
from collections.abc import AsyncIterator
from datetime import datetime, timedelta, timezone

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession

from record_authz.auth.evaluator import Authorizer, DenyReason
from record_authz.auth.identities import ADMIN_1, USER_1, USER_2, VISITOR_1, VISITOR_2
from record_authz.auth.models import ANONYMOUS, ResourceAuthFields
from record_authz.db.init_db import init_db
from record_authz.db.repositories.forecasts import SUMMARIES, ForecastRepo, seed_forecasts
from record_authz.db.session import create_engine, create_sessionmaker
from record_authz.services.forecast_service import AccessDenied, ForecastNotFound, ForecastService
from record_authz.settings import Settings


@pytest_asyncio.fixture
async def session(tmp_path) -> AsyncIterator[AsyncSession]:
    settings = Settings(env="test", database_url=f"sqlite+aiosqlite:///{tmp_path / 'svc.db'}")
    engine = create_engine(settings)
    await init_db(engine)
    try:
        async with create_sessionmaker(engine)() as s:
            yield s
    finally:
        await engine.dispose()


@pytest.fixture
def svc(session: AsyncSession, authorizer: Authorizer) -> ForecastService:
    return ForecastService(session=session, authorizer=authorizer)


async def _user1_forecast(svc: ForecastService):
    return await svc.add(
        USER_1.to_principal(), date=datetime(2030, 1, 2), temperature_c=20, summary="Mild"
    )


@pytest.mark.asyncio
async def test_user_adds_forecast_as_owner(svc: ForecastService) -> None:
    forecast = await _user1_forecast(svc)

    assert forecast.owner_id == USER_1.id
    assert forecast.auth_fields() == ResourceAuthFields(owner_id=USER_1.id)
    assert forecast.temperature_f == 67


@pytest.mark.asyncio
async def test_visitor_cannot_add(svc: ForecastService) -> None:
    with pytest.raises(AccessDenied) as exc:
        await svc.add(VISITOR_1.to_principal(), date=datetime(2030, 1, 1), temperature_c=0)
    assert exc.value.result.reason is DenyReason.requirement_unmet


@pytest.mark.asyncio
async def test_anonymous_cannot_list(svc: ForecastService) -> None:
    with pytest.raises(AccessDenied) as exc:
        await svc.list(ANONYMOUS)
    assert exc.value.result.reason is DenyReason.unauthenticated_principal


@pytest.mark.asyncio
async def test_owner_and_admin_may_update_others_may_not(svc: ForecastService) -> None:
    forecast = await _user1_forecast(svc)

    updated = await svc.update(USER_1.to_principal(), forecast.id, temperature_c=25)
    assert updated.temperature_c == 25

    with pytest.raises(AccessDenied):
        await svc.update(USER_2.to_principal(), forecast.id, summary="Hot")

    updated = await svc.update(ADMIN_1.to_principal(), forecast.id, summary="Hot")
    assert updated.summary == "Hot"
    assert updated.owner_id == USER_1.id


@pytest.mark.asyncio
async def test_delete_requires_manager(svc: ForecastService) -> None:
    forecast = await _user1_forecast(svc)

    with pytest.raises(AccessDenied):
        await svc.delete(USER_2.to_principal(), forecast.id)

    await svc.delete(USER_1.to_principal(), forecast.id)
    with pytest.raises(ForecastNotFound):
        await svc.get(USER_1.to_principal(), forecast.id)


@pytest.mark.asyncio
async def test_missing_record_is_not_found(svc: ForecastService) -> None:
    with pytest.raises(ForecastNotFound):
        await svc.update(ADMIN_1.to_principal(), uuid.uuid4(), summary="Cool")


@pytest.mark.asyncio
async def test_permissions(svc: ForecastService) -> None:
    forecast = await _user1_forecast(svc)

    owner = await svc.permissions(USER_1.to_principal(), forecast.id)
    stranger = await svc.permissions(USER_2.to_principal(), forecast.id)
    admin = await svc.permissions(ADMIN_1.to_principal(), forecast.id)
    anonymous = await svc.permissions(ANONYMOUS, forecast.id)

    assert (owner.can_edit, owner.can_delete) == (True, True)
    assert (stranger.can_edit, stranger.can_delete) == (False, False)
    assert (admin.can_edit, admin.can_delete) == (True, True)
    assert (anonymous.can_edit, anonymous.can_delete) == (False, False)


@pytest.mark.asyncio
async def test_seeded_forecasts_belong_to_visitors(svc: ForecastService, session: AsyncSession) -> None:
    repo = ForecastRepo(session)
    await seed_forecasts(repo, 5, rng=random.Random(7))
    await session.commit()

    forecasts = await svc.list(VISITOR_1.to_principal())

    assert len(forecasts) == 5
    assert await repo.count() == 5
    assert [f.date for f in forecasts] == sorted(f.date for f in forecasts)
    assert {f.owner_id for f in forecasts} <= {VISITOR_1.id, VISITOR_2.id}
    assert all(f.summary in SUMMARIES for f in forecasts)
    assert all(-20 <= f.temperature_c <= 54 for f in forecasts)


@pytest.mark.asyncio
async def test_repo_orders_offset_dates_by_utc_instant(session: AsyncSession) -> None:
    repo = ForecastRepo(session)
    plus_five = timezone(timedelta(hours=5))
    # 05:00+05:00 is 00:00 UTC, earlier than 01:00 naive UTC.
    later = await repo.add(owner_id=USER_1.id, date=datetime(2030, 1, 2, 1), temperature_c=1)
    earlier = await repo.add(
        owner_id=USER_1.id, date=datetime(2030, 1, 2, 5, tzinfo=plus_five), temperature_c=2
    )

    assert earlier.date == datetime(2030, 1, 2, 0)
    assert [f.id for f in await repo.list_by_date()] == [earlier.id, later.id]
