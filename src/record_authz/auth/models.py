"""
record_authz.auth.models

Auth domain models.

Responsibilities:
- Define the identity type (`Principal`) handed to every authorization check.
- Define the resource-side snapshot (`ResourceAuthFields`) ownership handlers compare against.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True, slots=True)
class Principal:
    """
    Caller identity (authenticated or anonymous).

    The anonymous principal is the zero value: empty identity id and no roles.
    """

    identity_id: str = ""
    name: str = ""
    roles: frozenset[str] = field(default_factory=frozenset)

    def __post_init__(self) -> None:
        # Callers may pass any iterable; keep an immutable copy.
        object.__setattr__(self, "roles", frozenset(self.roles))
        if not self.identity_id and self.roles:
            raise ValueError("anonymous principal cannot hold roles")

    @classmethod
    def anonymous(cls) -> Principal:
        return ANONYMOUS

    @property
    def is_authenticated(self) -> bool:
        return bool(self.identity_id)

    def is_in_role(self, role: str) -> bool:
        return role in self.roles

    def has_any_role(self, roles: Iterable[str]) -> bool:
        return not self.roles.isdisjoint(roles)


ANONYMOUS = Principal()


@dataclass(frozen=True, slots=True)
class ResourceAuthFields:
    """
    Owner/assignee ids of one resource instance, captured for a single check.
    """

    owner_id: str = ""
    assignee_id: str = ""

    @classmethod
    def of(cls, record: Any) -> ResourceAuthFields:
        # Records without the fields produce empty ids, which never match a principal.
        return cls(
            owner_id=_as_id(getattr(record, "owner_id", None)),
            assignee_id=_as_id(getattr(record, "assignee_id", None)),
        )


def _as_id(value: Any) -> str:
    if value is None:
        return ""
    return str(value)


# --- Module Notes -----------------------------------------------------------
# Both types are immutable snapshots; an identity change replaces the Principal wholesale.
