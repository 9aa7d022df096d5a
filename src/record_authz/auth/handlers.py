"""
record_authz.auth.handlers

Requirement handlers.

Responsibilities:
- Provide the evaluator contract: `(principal, resource | None) -> bool`.
- Implement the two concrete strategies: role tier and record ownership.

A handler either succeeds (True) or abstains (False). It never denies outright,
never mutates its inputs, and never relies on another handler having run.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from typing import Protocol

from record_authz.auth.models import Principal, ResourceAuthFields

_OWNERSHIP_FIELDS = frozenset({"owner_id", "assignee_id"})


class Handler(Protocol):
    def __call__(self, principal: Principal, resource: ResourceAuthFields | None) -> bool: ...


@dataclass(frozen=True, slots=True)
class RoleTierHandler:
    """
    Succeeds when the principal holds any role in the allow-list.
    """

    roles: frozenset[str]

    def __post_init__(self) -> None:
        object.__setattr__(self, "roles", frozenset(self.roles))

    @classmethod
    def of(cls, *roles: str) -> RoleTierHandler:
        return cls(roles=frozenset(roles))

    def __call__(self, principal: Principal, resource: ResourceAuthFields | None) -> bool:
        return principal.has_any_role(self.roles)


@dataclass(frozen=True, slots=True)
class OwnershipHandler:
    """
    Succeeds when the resource's `field` id equals the principal's identity id.

    Absent resources and empty ids on either side abstain.
    """

    field: str = "owner_id"

    def __post_init__(self) -> None:
        if self.field not in _OWNERSHIP_FIELDS:
            raise ValueError(f"unsupported ownership field: {self.field!r}")

    def __call__(self, principal: Principal, resource: ResourceAuthFields | None) -> bool:
        if resource is None or not principal.identity_id:
            return False
        resource_id = getattr(resource, self.field, "")
        return bool(resource_id) and resource_id == principal.identity_id


def any_succeeds(
    handlers: Iterable[Handler],
    principal: Principal,
    resource: ResourceAuthFields | None,
) -> bool:
    # Handlers are independent and side-effect free, so stopping at the first success is safe.
    return any(handler(principal, resource) for handler in handlers)


# --- Module Notes -----------------------------------------------------------
# Plain functions with the same signature are valid handlers too; the registry only
# relies on the call contract.
