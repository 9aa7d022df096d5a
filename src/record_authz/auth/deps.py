"""
record_authz.auth.deps

FastAPI dependency functions for authentication and authorization.

Responsibilities:
- Resolve the calling `Principal` (bearer token, dev identity switcher, or anonymous).
- Enforce role-only policies via reusable dependency factories.
- Translate denied results into HTTP errors.
"""

from __future__ import annotations

from fastapi import Depends, HTTPException, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from starlette.status import HTTP_401_UNAUTHORIZED, HTTP_403_FORBIDDEN

from record_authz.auth.evaluator import AuthorizationResult, Authorizer, DenyReason
from record_authz.auth.jwt import (
    JwtConfig,
    JwtValidationError,
    decode_and_validate,
    principal_from_claims,
)
from record_authz.auth.models import ANONYMOUS, Principal
from record_authz.auth.state import AuthenticationStateProvider
from record_authz.settings import Settings

_bearer = HTTPBearer(auto_error=False)


def jwt_config(settings: Settings) -> JwtConfig:
    return JwtConfig(
        alg=settings.jwt_alg,
        issuer=settings.jwt_issuer,
        audience=settings.jwt_audience,
        secret=settings.jwt_secret,
    )


def app_settings(request: Request) -> Settings:
    # The settings the app was built with, not the env-cached ones.
    return request.app.state.settings  # type: ignore[attr-defined]


def get_authorizer(request: Request) -> Authorizer:
    # Built once in `record_authz.api.app.create_app`.
    return request.app.state.authorizer  # type: ignore[attr-defined]


def get_auth_state(request: Request) -> AuthenticationStateProvider:
    return request.app.state.auth_state  # type: ignore[attr-defined]


def get_principal(
    creds: HTTPAuthorizationCredentials | None = Depends(_bearer),
    settings: Settings = Depends(app_settings),
    auth_state: AuthenticationStateProvider = Depends(get_auth_state),
) -> Principal:
    if creds is not None and creds.credentials:
        try:
            payload = decode_and_validate(cfg=jwt_config(settings), token=creds.credentials)
            return principal_from_claims(payload)
        except JwtValidationError as e:
            raise HTTPException(status_code=HTTP_401_UNAUTHORIZED, detail=f"Invalid token: {e}") from e

    # No token: outside prod the dev identity switcher decides who is signed in.
    if settings.env != "prod":
        return auth_state.current()
    return ANONYMOUS


def raise_for_result(result: AuthorizationResult) -> None:
    if result.succeeded:
        return
    if result.reason is DenyReason.unauthenticated_principal:
        raise HTTPException(status_code=HTTP_401_UNAUTHORIZED, detail="Authentication required")
    raise HTTPException(status_code=HTTP_403_FORBIDDEN, detail=f"Policy {result.policy} not satisfied")


def require_policy(policy_name: str):
    def _dep(
        principal: Principal = Depends(get_principal),
        authorizer: Authorizer = Depends(get_authorizer),
    ) -> Principal:
        raise_for_result(authorizer.authorize(principal, policy_name))
        return principal

    return _dep


# --- Module Notes -----------------------------------------------------------
# Resource-scoped policies need the record loaded first; those checks run in the
# service layer (`services.forecast_service`) rather than as router dependencies.
