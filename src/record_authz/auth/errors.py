"""
record_authz.auth.errors

Exception taxonomy for the authorization engine.

Responsibilities:
- Signal registry misconfiguration at startup (fail fast).
- Signal lookups of unknown policies (turned into a deny by the evaluator).
"""

from __future__ import annotations

from collections.abc import Iterable

from record_authz.auth.requirements import RequirementKind


class AuthorizationError(Exception):
    pass


class PolicyNotFoundError(AuthorizationError):
    def __init__(self, name: str) -> None:
        super().__init__(f"policy not registered: {name!r}")
        self.name = name


class NoApplicableHandlerError(AuthorizationError):
    def __init__(self, kinds: Iterable[RequirementKind]) -> None:
        self.kinds = tuple(sorted(kinds))
        super().__init__(
            "no handler registered for requirement kind(s): "
            + ", ".join(k.value for k in self.kinds)
        )


class RegistryFrozenError(AuthorizationError):
    pass


class RegistryNotReadyError(AuthorizationError):
    pass


# --- Module Notes -----------------------------------------------------------
# Unauthenticated principals and malformed resources are never raised; they resolve
# to a denied AuthorizationResult (see `auth.evaluator`).
