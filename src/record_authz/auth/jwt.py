"""
record_authz.auth.jwt

JWT issuing and validation helpers.

Responsibilities:
- Issue short-lived JWTs carrying a principal's claims (id, name, roles).
- Decode and validate JWTs with strict claim requirements (iss/aud/exp/iat/sub).
- Rebuild a `Principal` from validated claims.

Note:
- Production systems often prefer RS256 + JWKS; this repo uses HS256 for simplicity.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import Any

import jwt
from jwt import InvalidTokenError

from record_authz.auth.models import Principal


@dataclass(frozen=True, slots=True)
class JwtConfig:
    # Algorithm/issuer/audience are enforced during decoding.
    alg: str
    issuer: str
    audience: str
    secret: str


class JwtValidationError(Exception):
    pass


def issue_token(
    *,
    cfg: JwtConfig,
    principal: Principal,
    ttl: timedelta = timedelta(hours=1),
) -> str:
    if not principal.is_authenticated:
        raise ValueError("cannot issue a token for an anonymous principal")

    now = datetime.now(tz=UTC)
    payload: dict[str, Any] = {
        "iss": cfg.issuer,
        "aud": cfg.audience,
        "sub": principal.identity_id,
        "name": principal.name,
        "roles": sorted(principal.roles),
        "iat": int(now.timestamp()),
        "exp": int((now + ttl).timestamp()),
    }
    return jwt.encode(payload, cfg.secret, algorithm=cfg.alg)


def decode_and_validate(*, cfg: JwtConfig, token: str) -> dict[str, Any]:
    try:
        # jwt.decode enforces signature + registered claims (issuer/audience/exp, etc.).
        return jwt.decode(
            token,
            cfg.secret,
            algorithms=[cfg.alg],
            issuer=cfg.issuer,
            audience=cfg.audience,
            options={
                "require": ["exp", "iat", "iss", "aud", "sub"],
            },
        )
    except InvalidTokenError as e:
        raise JwtValidationError(str(e)) from e


def principal_from_claims(payload: dict[str, Any]) -> Principal:
    subject = str(payload.get("sub", ""))
    roles_raw = payload.get("roles", [])
    if not subject:
        raise JwtValidationError("token subject is empty")
    if not isinstance(roles_raw, list):
        raise JwtValidationError("token roles must be a list")

    return Principal(
        identity_id=subject,
        name=str(payload.get("name", "")),
        roles=frozenset(str(r) for r in roles_raw),
    )


# --- Module Notes -----------------------------------------------------------
# Token issuing is used by `api/routers/dev_auth.py` to mint tokens for test identities.
