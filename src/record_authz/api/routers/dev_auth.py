from __future__ import annotations

from datetime import timedelta

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field
from starlette.status import HTTP_404_NOT_FOUND

from record_authz.auth.deps import app_settings, get_auth_state, jwt_config
from record_authz.auth.identities import find_identity, identity_names, identity_names_by_id
from record_authz.auth.jwt import issue_token
from record_authz.auth.models import Principal
from record_authz.auth.state import AuthenticationStateProvider
from record_authz.settings import Settings


def _dev_only(settings: Settings = Depends(app_settings)) -> None:
    if settings.env == "prod":
        raise HTTPException(status_code=HTTP_404_NOT_FOUND, detail="Not found")


router = APIRouter(prefix="/v1/dev", tags=["dev"], dependencies=[Depends(_dev_only)])


class PrincipalView(BaseModel):
    identity_id: str
    name: str
    roles: list[str]
    authenticated: bool

    @classmethod
    def of(cls, principal: Principal) -> PrincipalView:
        return cls(
            identity_id=principal.identity_id,
            name=principal.name,
            roles=sorted(principal.roles),
            authenticated=principal.is_authenticated,
        )


class IdentityListResponse(BaseModel):
    identities: list[str]
    by_id: dict[str, str]


class ChangeIdentityRequest(BaseModel):
    # Test identity name or id; "None" signs out.
    identity: str = Field(min_length=1, max_length=64)


class DevTokenRequest(BaseModel):
    identity: str = Field(min_length=1, max_length=64)
    ttl_minutes: int = Field(default=60, ge=1, le=24 * 60)


class DevTokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"


@router.get("/identities", response_model=IdentityListResponse)
async def list_identities() -> IdentityListResponse:
    return IdentityListResponse(identities=identity_names(), by_id=identity_names_by_id())


@router.get("/identity", response_model=PrincipalView)
async def current_identity(
    auth_state: AuthenticationStateProvider = Depends(get_auth_state),
) -> PrincipalView:
    return PrincipalView.of(auth_state.current())


@router.post("/identity", response_model=PrincipalView)
async def change_identity(
    body: ChangeIdentityRequest,
    auth_state: AuthenticationStateProvider = Depends(get_auth_state),
) -> PrincipalView:
    return PrincipalView.of(auth_state.change_identity(body.identity))


@router.post("/token", response_model=DevTokenResponse)
async def mint_dev_token(
    body: DevTokenRequest,
    settings: Settings = Depends(app_settings),
) -> DevTokenResponse:
    identity = find_identity(body.identity)
    if identity is None:
        raise HTTPException(status_code=HTTP_404_NOT_FOUND, detail="Unknown test identity")

    token = issue_token(
        cfg=jwt_config(settings),
        principal=identity.to_principal(),
        ttl=timedelta(minutes=body.ttl_minutes),
    )
    return DevTokenResponse(access_token=token)
