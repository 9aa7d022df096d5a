"""
record_authz.db.repositories.forecasts

Repository for `WeatherForecast` records.

Responsibilities:
- CRUD access to forecasts, ordered by forecast date.
- Seed random forecasts for dev/test environments.
"""

from __future__ import annotations

import random
import uuid
from datetime import datetime, timedelta, timezone

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from record_authz.auth.identities import VISITOR_1, VISITOR_2
from record_authz.db.models import WeatherForecast

SUMMARIES = (
    "Freezing",
    "Bracing",
    "Chilly",
    "Cool",
    "Mild",
    "Warm",
    "Balmy",
    "Hot",
    "Sweltering",
    "Scorching",
)


def _naive_utc(value: datetime) -> datetime:
    # The date column is timezone-naive and holds UTC.
    if value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


class ForecastRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def add(
        self,
        *,
        owner_id: str,
        date: datetime,
        temperature_c: int,
        summary: str | None = None,
        assignee_id: str = "",
    ) -> WeatherForecast:
        forecast = WeatherForecast(
            owner_id=owner_id,
            assignee_id=assignee_id,
            date=_naive_utc(date),
            temperature_c=temperature_c,
            summary=summary,
        )
        self._session.add(forecast)
        await self._session.flush()
        return forecast

    async def get(self, forecast_id: uuid.UUID) -> WeatherForecast | None:
        return await self._session.get(WeatherForecast, forecast_id)

    async def list_by_date(self, *, limit: int = 200) -> list[WeatherForecast]:
        stmt = select(WeatherForecast).order_by(WeatherForecast.date).limit(limit)
        return list((await self._session.execute(stmt)).scalars().all())

    async def count(self) -> int:
        stmt = select(func.count()).select_from(WeatherForecast)
        return int((await self._session.execute(stmt)).scalar_one())

    async def update(
        self,
        forecast: WeatherForecast,
        *,
        date: datetime | None = None,
        temperature_c: int | None = None,
        summary: str | None = None,
        assignee_id: str | None = None,
    ) -> WeatherForecast:
        # Ownership is not editable here; it is part of the record's authorization snapshot.
        if date is not None:
            forecast.date = _naive_utc(date)
        if temperature_c is not None:
            forecast.temperature_c = temperature_c
        if summary is not None:
            forecast.summary = summary
        if assignee_id is not None:
            forecast.assignee_id = assignee_id
        await self._session.flush()
        return forecast

    async def delete(self, forecast: WeatherForecast) -> None:
        await self._session.delete(forecast)
        await self._session.flush()


async def seed_forecasts(
    repo: ForecastRepo,
    count: int,
    *,
    rng: random.Random | None = None,
) -> list[WeatherForecast]:
    """
    Create `count` random forecasts, one per day from tomorrow.

    Owners alternate randomly between the two visitor identities.
    """

    rng = rng or random.Random()
    today = datetime.utcnow().replace(hour=0, minute=0, second=0, microsecond=0)
    created: list[WeatherForecast] = []
    for day in range(1, count + 1):
        owner = rng.choice((VISITOR_1, VISITOR_2))
        created.append(
            await repo.add(
                owner_id=owner.id,
                date=today + timedelta(days=day),
                temperature_c=rng.randint(-20, 54),
                summary=rng.choice(SUMMARIES),
            )
        )
    return created
