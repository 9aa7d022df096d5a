"""
record_authz.services.forecast_service

Forecast service (transaction + authorization owner).

Responsibilities:
- Load records before resource-scoped checks so handlers see a complete snapshot.
- Authorize every read and write against the standard app policies.
- Commit changes and log denials.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass
from datetime import datetime

from sqlalchemy.ext.asyncio import AsyncSession

from record_authz.auth.app_policies import (
    IS_EDITOR_POLICY,
    IS_MANAGER_POLICY,
    IS_USER_POLICY,
    IS_VISITOR_POLICY,
)
from record_authz.auth.evaluator import AuthorizationResult, Authorizer
from record_authz.auth.models import Principal, ResourceAuthFields
from record_authz.db.models import WeatherForecast
from record_authz.db.repositories.forecasts import ForecastRepo
from record_authz.observability.logging import get_logger

log = get_logger(__name__)


class AccessDenied(Exception):
    def __init__(self, result: AuthorizationResult) -> None:
        super().__init__(f"policy {result.policy} denied: {result.reason}")
        self.result = result


class ForecastNotFound(Exception):
    def __init__(self, forecast_id: uuid.UUID) -> None:
        super().__init__(f"forecast not found: {forecast_id}")
        self.forecast_id = forecast_id


@dataclass(frozen=True, slots=True)
class RecordPermissions:
    can_edit: bool
    can_delete: bool


class ForecastService:
    def __init__(self, *, session: AsyncSession, authorizer: Authorizer) -> None:
        self._session = session
        self._authorizer = authorizer
        self._forecasts = ForecastRepo(session)

    async def list(self, principal: Principal) -> list[WeatherForecast]:
        self._require(principal, IS_VISITOR_POLICY)
        return await self._forecasts.list_by_date()

    async def get(self, principal: Principal, forecast_id: uuid.UUID) -> WeatherForecast:
        self._require(principal, IS_VISITOR_POLICY)
        return await self._load(forecast_id)

    async def add(
        self,
        principal: Principal,
        *,
        date: datetime,
        temperature_c: int,
        summary: str | None = None,
    ) -> WeatherForecast:
        self._require(principal, IS_USER_POLICY)
        forecast = await self._forecasts.add(
            owner_id=principal.identity_id,
            date=date,
            temperature_c=temperature_c,
            summary=summary,
        )
        await self._session.commit()
        log.info("forecast_added", forecast_id=str(forecast.id), owner_id=forecast.owner_id)
        return forecast

    async def update(
        self,
        principal: Principal,
        forecast_id: uuid.UUID,
        *,
        date: datetime | None = None,
        temperature_c: int | None = None,
        summary: str | None = None,
        assignee_id: str | None = None,
    ) -> WeatherForecast:
        forecast = await self._load(forecast_id)
        self._require(principal, IS_EDITOR_POLICY, forecast.auth_fields())
        await self._forecasts.update(
            forecast,
            date=date,
            temperature_c=temperature_c,
            summary=summary,
            assignee_id=assignee_id,
        )
        await self._session.commit()
        log.info("forecast_updated", forecast_id=str(forecast_id), actor=principal.identity_id)
        return forecast

    async def delete(self, principal: Principal, forecast_id: uuid.UUID) -> None:
        forecast = await self._load(forecast_id)
        self._require(principal, IS_MANAGER_POLICY, forecast.auth_fields())
        await self._forecasts.delete(forecast)
        await self._session.commit()
        log.info("forecast_deleted", forecast_id=str(forecast_id), actor=principal.identity_id)

    async def permissions(self, principal: Principal, forecast_id: uuid.UUID) -> RecordPermissions:
        # Mirrors the UI question "should the edit/delete buttons render for this record?".
        fields = (await self._load(forecast_id)).auth_fields()
        return RecordPermissions(
            can_edit=self._authorizer.is_allowed(principal, IS_EDITOR_POLICY, fields),
            can_delete=self._authorizer.is_allowed(principal, IS_MANAGER_POLICY, fields),
        )

    async def _load(self, forecast_id: uuid.UUID) -> WeatherForecast:
        forecast = await self._forecasts.get(forecast_id)
        if forecast is None:
            raise ForecastNotFound(forecast_id)
        return forecast

    def _require(
        self,
        principal: Principal,
        policy_name: str,
        resource: ResourceAuthFields | None = None,
    ) -> None:
        result = self._authorizer.authorize(principal, policy_name, resource)
        if not result.succeeded:
            log.info(
                "access_denied",
                policy=policy_name,
                identity_id=principal.identity_id or None,
                reason=result.reason,
            )
            raise AccessDenied(result)


# --- Module Notes -----------------------------------------------------------
# Routers translate AccessDenied / ForecastNotFound into HTTP errors; this layer stays
# transport-agnostic so it can be exercised directly in tests.
