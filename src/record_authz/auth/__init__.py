"""
record_authz.auth

Authorization engine and its authentication collaborators.

Responsibilities:
- Principal/resource snapshots, requirement kinds, handlers, policy registry, evaluator.
- Standard app policies, test identities, identity-state provider.
- JWT helpers and FastAPI dependencies.
"""

from record_authz.auth.evaluator import AuthorizationResult, Authorizer, DenyReason
from record_authz.auth.models import ANONYMOUS, Principal, ResourceAuthFields
from record_authz.auth.policy import Policy, PolicyRegistry
from record_authz.auth.requirements import RequirementKind

__all__ = [
    "ANONYMOUS",
    "AuthorizationResult",
    "Authorizer",
    "DenyReason",
    "Policy",
    "PolicyRegistry",
    "Principal",
    "RequirementKind",
    "ResourceAuthFields",
]
