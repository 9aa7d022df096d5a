"""
record_authz.api.routers.forecasts

Weather forecast endpoints, each guarded by a standard app policy.

Responsibilities:
- CRUD over forecasts via `ForecastService` (which performs the policy checks).
- Report per-record permissions so clients can show or hide edit/delete actions.
- Map service errors to HTTP status codes.
"""

from __future__ import annotations

import uuid
from collections.abc import Iterator
from contextlib import contextmanager
from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field
from starlette.status import HTTP_201_CREATED, HTTP_204_NO_CONTENT, HTTP_404_NOT_FOUND

from record_authz.api.deps import forecast_service
from record_authz.auth.deps import get_principal, raise_for_result
from record_authz.auth.models import Principal
from record_authz.db.models import WeatherForecast
from record_authz.services.forecast_service import AccessDenied, ForecastNotFound, ForecastService

router = APIRouter(prefix="/v1/forecasts", tags=["forecasts"])


class ForecastCreateRequest(BaseModel):
    date: datetime
    temperature_c: int = Field(ge=-100, le=100)
    summary: str | None = Field(default=None, max_length=256)


class ForecastUpdateRequest(BaseModel):
    date: datetime | None = None
    temperature_c: int | None = Field(default=None, ge=-100, le=100)
    summary: str | None = Field(default=None, max_length=256)
    assignee_id: str | None = Field(default=None, max_length=64)


class ForecastResponse(BaseModel):
    id: uuid.UUID
    owner_id: str
    assignee_id: str
    date: datetime
    temperature_c: int
    temperature_f: int
    summary: str | None

    @classmethod
    def of(cls, forecast: WeatherForecast) -> ForecastResponse:
        return cls(
            id=forecast.id,
            owner_id=forecast.owner_id,
            assignee_id=forecast.assignee_id,
            date=forecast.date,
            temperature_c=forecast.temperature_c,
            temperature_f=forecast.temperature_f,
            summary=forecast.summary,
        )


class PermissionsResponse(BaseModel):
    can_edit: bool
    can_delete: bool


@contextmanager
def _service_errors() -> Iterator[None]:
    try:
        yield
    except ForecastNotFound as e:
        raise HTTPException(status_code=HTTP_404_NOT_FOUND, detail="Forecast not found") from e
    except AccessDenied as e:
        raise_for_result(e.result)


@router.get("", response_model=list[ForecastResponse])
async def list_forecasts(
    principal: Principal = Depends(get_principal),
    svc: ForecastService = Depends(forecast_service),
) -> list[ForecastResponse]:
    with _service_errors():
        forecasts = await svc.list(principal)
    return [ForecastResponse.of(f) for f in forecasts]


@router.post("", response_model=ForecastResponse, status_code=HTTP_201_CREATED)
async def add_forecast(
    body: ForecastCreateRequest,
    principal: Principal = Depends(get_principal),
    svc: ForecastService = Depends(forecast_service),
) -> ForecastResponse:
    with _service_errors():
        forecast = await svc.add(
            principal,
            date=body.date,
            temperature_c=body.temperature_c,
            summary=body.summary,
        )
    return ForecastResponse.of(forecast)


@router.get("/{forecast_id}", response_model=ForecastResponse)
async def get_forecast(
    forecast_id: uuid.UUID,
    principal: Principal = Depends(get_principal),
    svc: ForecastService = Depends(forecast_service),
) -> ForecastResponse:
    with _service_errors():
        forecast = await svc.get(principal, forecast_id)
    return ForecastResponse.of(forecast)


@router.put("/{forecast_id}", response_model=ForecastResponse)
async def update_forecast(
    forecast_id: uuid.UUID,
    body: ForecastUpdateRequest,
    principal: Principal = Depends(get_principal),
    svc: ForecastService = Depends(forecast_service),
) -> ForecastResponse:
    with _service_errors():
        forecast = await svc.update(
            principal,
            forecast_id,
            date=body.date,
            temperature_c=body.temperature_c,
            summary=body.summary,
            assignee_id=body.assignee_id,
        )
    return ForecastResponse.of(forecast)


@router.delete("/{forecast_id}", status_code=HTTP_204_NO_CONTENT)
async def delete_forecast(
    forecast_id: uuid.UUID,
    principal: Principal = Depends(get_principal),
    svc: ForecastService = Depends(forecast_service),
) -> None:
    with _service_errors():
        await svc.delete(principal, forecast_id)


@router.get("/{forecast_id}/permissions", response_model=PermissionsResponse)
async def forecast_permissions(
    forecast_id: uuid.UUID,
    principal: Principal = Depends(get_principal),
    svc: ForecastService = Depends(forecast_service),
) -> PermissionsResponse:
    with _service_errors():
        perms = await svc.permissions(principal, forecast_id)
    return PermissionsResponse(can_edit=perms.can_edit, can_delete=perms.can_delete)
