"""
record_authz.auth.evaluator

Policy evaluation: the single entry point callers use to ask for a decision.

Responsibilities:
- Resolve a policy by name (unknown names deny).
- Enforce authentication where the policy demands it.
- Combine handler votes: OR per requirement, AND across requirements.
- Report which requirements were unmet.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass

from record_authz.auth.errors import PolicyNotFoundError, RegistryNotReadyError
from record_authz.auth.handlers import any_succeeds
from record_authz.auth.models import Principal, ResourceAuthFields
from record_authz.auth.policy import PolicyRegistry
from record_authz.auth.requirements import RequirementKind
from record_authz.observability.logging import get_logger

log = get_logger(__name__)


class DenyReason(enum.StrEnum):
    policy_not_found = "policy_not_found"
    unauthenticated_principal = "unauthenticated_principal"
    no_applicable_handler = "no_applicable_handler"
    requirement_unmet = "requirement_unmet"


@dataclass(frozen=True, slots=True)
class AuthorizationResult:
    succeeded: bool
    policy: str
    reason: DenyReason | None = None
    unmet: tuple[RequirementKind, ...] = ()

    @classmethod
    def allowed(cls, policy: str) -> AuthorizationResult:
        return cls(succeeded=True, policy=policy)

    @classmethod
    def denied(
        cls,
        policy: str,
        reason: DenyReason,
        unmet: tuple[RequirementKind, ...] = (),
    ) -> AuthorizationResult:
        return cls(succeeded=False, policy=policy, reason=reason, unmet=unmet)

    def __bool__(self) -> bool:
        return self.succeeded


def evaluate_requirement(
    registry: PolicyRegistry,
    kind: RequirementKind,
    principal: Principal,
    resource: ResourceAuthFields | None,
) -> bool:
    return any_succeeds(registry.handlers_for(kind), principal, resource)


class Authorizer:
    def __init__(self, registry: PolicyRegistry) -> None:
        self._registry = registry

    @property
    def registry(self) -> PolicyRegistry:
        return self._registry

    def authorize(
        self,
        principal: Principal,
        policy_name: str,
        resource: ResourceAuthFields | object | None = None,
    ) -> AuthorizationResult:
        """
        Decide whether `principal` satisfies `policy_name` for `resource`.

        Every failure mode resolves to a denied result. The only exception raised is
        `RegistryNotReadyError`, which means wiring never completed.
        """

        if not self._registry.frozen:
            raise RegistryNotReadyError("authorize() called before the policy registry was frozen")

        if resource is not None and not isinstance(resource, ResourceAuthFields):
            # Handlers only see snapshots; fields the object lacks become empty ids.
            resource = ResourceAuthFields.of(resource)

        try:
            policy = self._registry.resolve(policy_name)
        except PolicyNotFoundError:
            log.warning("authorization_unknown_policy", policy=policy_name)
            return AuthorizationResult.denied(policy_name, DenyReason.policy_not_found)

        if policy.require_authenticated and not principal.is_authenticated:
            result = AuthorizationResult.denied(policy.name, DenyReason.unauthenticated_principal)
            return self._logged(result, principal)

        # Evaluate every requirement so the result lists all unmet kinds.
        unmet = tuple(
            kind
            for kind in policy.requirements
            if not evaluate_requirement(self._registry, kind, principal, resource)
        )
        if not unmet:
            return self._logged(AuthorizationResult.allowed(policy.name), principal)

        # freeze() rejects kinds without handlers; this only guards custom registries.
        no_handler = any(not self._registry.handlers_for(k) for k in unmet)
        reason = DenyReason.no_applicable_handler if no_handler else DenyReason.requirement_unmet
        return self._logged(AuthorizationResult.denied(policy.name, reason, unmet), principal)

    def is_allowed(
        self,
        principal: Principal,
        policy_name: str,
        resource: ResourceAuthFields | object | None = None,
    ) -> bool:
        return self.authorize(principal, policy_name, resource).succeeded

    @staticmethod
    def _logged(result: AuthorizationResult, principal: Principal) -> AuthorizationResult:
        log.debug(
            "authorization_decided",
            policy=result.policy,
            identity_id=principal.identity_id or None,
            succeeded=result.succeeded,
            reason=result.reason,
            unmet=[k.value for k in result.unmet],
        )
        return result


# --- Module Notes -----------------------------------------------------------
# `authorize` reads only its arguments and the frozen registry; it is safe to call
# concurrently from any number of threads or tasks.
