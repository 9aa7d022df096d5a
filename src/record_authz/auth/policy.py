"""
record_authz.auth.policy

Policy definitions and the build-once policy registry.

Responsibilities:
- Map policy names to their requirement kinds.
- Map requirement kinds to the handlers that can satisfy them.
- Validate the wiring at startup and make it read-only before the first check.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from record_authz.auth.errors import (
    NoApplicableHandlerError,
    PolicyNotFoundError,
    RegistryFrozenError,
)
from record_authz.auth.handlers import Handler
from record_authz.auth.requirements import RequirementKind
from record_authz.observability.logging import get_logger

log = get_logger(__name__)


@dataclass(frozen=True, slots=True)
class Policy:
    """
    Named AND-combination of requirement kinds.
    """

    name: str
    requirements: tuple[RequirementKind, ...]
    require_authenticated: bool = True


class PolicyRegistry:
    def __init__(self) -> None:
        self._policies: dict[str, Policy] = {}
        self._handlers: dict[RequirementKind, tuple[Handler, ...]] = {}
        self._frozen = False

    @property
    def frozen(self) -> bool:
        return self._frozen

    def register_policy(
        self,
        name: str,
        requirements: Iterable[RequirementKind],
        *,
        require_authenticated: bool = True,
    ) -> Policy:
        self._ensure_mutable()
        if not name:
            raise ValueError("policy name must not be empty")
        if name in self._policies:
            raise ValueError(f"policy already registered: {name!r}")

        # De-dupe while keeping order; a repeated kind adds nothing to an AND.
        kinds = tuple(dict.fromkeys(RequirementKind(k) for k in requirements))
        if not kinds and not require_authenticated:
            raise ValueError(f"policy {name!r} has no requirements and would allow everyone")

        policy = Policy(name=name, requirements=kinds, require_authenticated=require_authenticated)
        self._policies[name] = policy
        return policy

    def register_handler(self, kind: RequirementKind, handler: Handler) -> None:
        self._ensure_mutable()
        if not callable(handler):
            raise TypeError(f"handler for {kind} is not callable: {handler!r}")
        kind = RequirementKind(kind)
        self._handlers[kind] = (*self._handlers.get(kind, ()), handler)

    def freeze(self) -> PolicyRegistry:
        if self._frozen:
            return self

        referenced = {k for p in self._policies.values() for k in p.requirements}
        missing = referenced - self._handlers.keys()
        if missing:
            raise NoApplicableHandlerError(missing)

        self._frozen = True
        log.info(
            "policy_registry_frozen",
            policies=sorted(self._policies),
            handler_kinds=sorted(k.value for k in self._handlers),
        )
        return self

    def resolve(self, name: str) -> Policy:
        try:
            return self._policies[name]
        except KeyError:
            raise PolicyNotFoundError(name) from None

    def handlers_for(self, kind: RequirementKind) -> tuple[Handler, ...]:
        return self._handlers.get(kind, ())

    def policy_names(self) -> list[str]:
        return sorted(self._policies)

    def _ensure_mutable(self) -> None:
        if self._frozen:
            raise RegistryFrozenError("policy registry is frozen; register before startup completes")


# --- Module Notes -----------------------------------------------------------
# After `freeze()` the registry is only read, so concurrent checks need no locking.
