from __future__ import annotations

from fastapi import APIRouter, Depends

from record_authz.auth.app_policies import IS_ADMIN_AREA_POLICY
from record_authz.auth.deps import get_authorizer, require_policy
from record_authz.auth.evaluator import Authorizer

router = APIRouter(
    prefix="/v1/admin",
    tags=["admin"],
    dependencies=[Depends(require_policy(IS_ADMIN_AREA_POLICY))],
)


@router.get("/policies")
async def list_policies(authorizer: Authorizer = Depends(get_authorizer)) -> dict[str, list[str]]:
    registry = authorizer.registry
    return {
        name: [k.value for k in registry.resolve(name).requirements]
        for name in registry.policy_names()
    }
