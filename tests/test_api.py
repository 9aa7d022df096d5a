"""
tests.test_api

End-to-end checks of the HTTP surface: health, dev identity switching, token auth,
and policy enforcement on forecast records.
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import httpx
import pytest
from fastapi import FastAPI

from record_authz.api.app import create_app
from record_authz.auth.identities import ADMIN_1, USER_1
from record_authz.settings import Settings


@asynccontextmanager
async def _client(settings: Settings) -> AsyncIterator[tuple[FastAPI, httpx.AsyncClient]]:
    app = create_app(settings=settings)
    # httpx ASGITransport does not run the lifespan; drive it explicitly.
    async with app.router.lifespan_context(app):
        transport = httpx.ASGITransport(app=app)
        async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
            yield app, client


def _settings(tmp_path, **overrides) -> Settings:
    values = {
        "env": "test",
        "database_url": f"sqlite+aiosqlite:///{tmp_path / 'api.db'}",
        "seed_forecast_count": 0,
    }
    values.update(overrides)
    return Settings(**values)


async def _token(client: httpx.AsyncClient, identity: str) -> dict[str, str]:
    r = await client.post("/v1/dev/token", json={"identity": identity})
    assert r.status_code == 200
    return {"Authorization": f"Bearer {r.json()['access_token']}"}


_FORECAST = {"date": "2030-01-02T00:00:00", "temperature_c": 20, "summary": "Mild"}


@pytest.mark.asyncio
async def test_health_endpoints(tmp_path) -> None:
    async with _client(_settings(tmp_path)) as (_, client):
        r = await client.get("/healthz")
        assert r.status_code == 200
        assert r.json()["status"] == "ok"
        assert r.headers["x-request-id"]

        r = await client.get("/readyz")
        assert r.status_code == 200
        assert r.json()["status"] == "ready"


@pytest.mark.asyncio
async def test_startup_seeds_forecasts(tmp_path) -> None:
    async with _client(_settings(tmp_path, seed_forecast_count=3)) as (_, client):
        r = await client.get("/v1/forecasts", headers=await _token(client, "Visitor-1"))
        assert r.status_code == 200
        assert len(r.json()) == 3


@pytest.mark.asyncio
async def test_record_policies_with_tokens(tmp_path) -> None:
    async with _client(_settings(tmp_path)) as (_, client):
        user1 = await _token(client, "User-1")
        user2 = await _token(client, "User-2")
        admin = await _token(client, "Admin-1")
        visitor = await _token(client, "Visitor-1")

        r = await client.post("/v1/forecasts", json=_FORECAST, headers=visitor)
        assert r.status_code == 403

        r = await client.post("/v1/forecasts", json=_FORECAST, headers=user1)
        assert r.status_code == 201
        forecast = r.json()
        assert forecast["owner_id"] == USER_1.id
        url = f"/v1/forecasts/{forecast['id']}"

        r = await client.put(url, json={"summary": "Hot"}, headers=user2)
        assert r.status_code == 403

        r = await client.put(url, json={"temperature_c": 30}, headers=user1)
        assert r.status_code == 200
        assert r.json()["temperature_c"] == 30

        r = await client.put(url, json={"summary": "Hot"}, headers=admin)
        assert r.status_code == 200
        assert r.json()["summary"] == "Hot"

        r = await client.get(f"{url}/permissions", headers=user2)
        assert r.json() == {"can_edit": False, "can_delete": False}
        r = await client.get(f"{url}/permissions", headers=user1)
        assert r.json() == {"can_edit": True, "can_delete": True}

        r = await client.delete(url, headers=user2)
        assert r.status_code == 403
        r = await client.delete(url, headers=admin)
        assert r.status_code == 204

        r = await client.get(url, headers=visitor)
        assert r.status_code == 404


@pytest.mark.asyncio
async def test_offset_dates_are_stored_as_utc(tmp_path) -> None:
    async with _client(_settings(tmp_path)) as (_, client):
        user1 = await _token(client, "User-1")

        body = {**_FORECAST, "date": "2030-01-02T05:00:00+05:00"}
        r = await client.post("/v1/forecasts", json=body, headers=user1)
        assert r.status_code == 201
        created = r.json()
        assert created["date"] == "2030-01-02T00:00:00"

        url = f"/v1/forecasts/{created['id']}"
        r = await client.get(url, headers=user1)
        assert r.json()["date"] == created["date"]

        r = await client.put(url, json={"date": "2030-01-03T00:00:00-02:00"}, headers=user1)
        assert r.json()["date"] == "2030-01-03T02:00:00"
        r = await client.get(url, headers=user1)
        assert r.json()["date"] == "2030-01-03T02:00:00"


@pytest.mark.asyncio
async def test_anonymous_and_invalid_tokens(tmp_path) -> None:
    async with _client(_settings(tmp_path)) as (_, client):
        r = await client.get("/v1/forecasts")
        assert r.status_code == 401

        r = await client.get("/v1/forecasts", headers={"Authorization": "Bearer not-a-jwt"})
        assert r.status_code == 401
        assert r.json()["detail"].startswith("Invalid token")


@pytest.mark.asyncio
async def test_dev_identity_switcher_drives_unauthenticated_requests(tmp_path) -> None:
    async with _client(_settings(tmp_path)) as (app, client):
        r = await client.get("/v1/dev/identities")
        assert r.json()["identities"][0] == "None"

        r = await client.post("/v1/dev/identity", json={"identity": "admin-1"})
        assert r.status_code == 200
        assert r.json() == {
            "identity_id": ADMIN_1.id,
            "name": "Admin-1",
            "roles": ["AdminRole"],
            "authenticated": True,
        }
        assert app.state.auth_state.current() == ADMIN_1.to_principal()

        r = await client.get("/v1/admin/policies")
        assert r.status_code == 200
        assert r.json()["IsEditorPolicy"] == ["record-editor"]
        assert r.json()["IsViewerPolicy"] == []

        r = await client.post("/v1/dev/identity", json={"identity": "User-2"})
        r = await client.get("/v1/admin/policies")
        assert r.status_code == 403

        r = await client.post("/v1/dev/identity", json={"identity": "None"})
        assert r.json()["authenticated"] is False
        r = await client.get("/v1/admin/policies")
        assert r.status_code == 401


@pytest.mark.asyncio
async def test_initial_identity_setting(tmp_path) -> None:
    async with _client(_settings(tmp_path, initial_identity="User-1")) as (_, client):
        r = await client.get("/v1/dev/identity")
        assert r.json()["identity_id"] == USER_1.id

        r = await client.post("/v1/forecasts", json=_FORECAST)
        assert r.status_code == 201


@pytest.mark.asyncio
async def test_unknown_identity_token_is_not_found(tmp_path) -> None:
    async with _client(_settings(tmp_path)) as (_, client):
        r = await client.post("/v1/dev/token", json={"identity": "Mallory"})
        assert r.status_code == 404


@pytest.mark.asyncio
async def test_prod_hides_dev_routes_and_ignores_switcher(tmp_path) -> None:
    async with _client(_settings(tmp_path, env="prod", initial_identity="Admin-1")) as (_, client):
        r = await client.get("/v1/dev/identities")
        assert r.status_code == 404

        # Without a token, prod requests are anonymous even though the switcher holds Admin-1.
        r = await client.get("/v1/admin/policies")
        assert r.status_code == 401
