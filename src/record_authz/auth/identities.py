"""
record_authz.auth.identities

Fixed test identities used by the dev identity switcher and the seeded data.

Responsibilities:
- Define the six test identities (two per role).
- Resolve an identity by name or id into a `Principal`.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass

from record_authz.auth.app_policies import ADMIN_ROLE, USER_ROLE, VISITOR_ROLE
from record_authz.auth.models import ANONYMOUS, Principal

NO_IDENTITY = "None"


@dataclass(frozen=True, slots=True)
class TestIdentity:
    # Not a pytest test class.
    __test__ = False

    name: str
    id: str
    role: str

    def to_principal(self) -> Principal:
        return Principal(identity_id=self.id, name=self.name, roles=frozenset({self.role}))


VISITOR_1 = TestIdentity("Visitor-1", "10000000-0000-0000-0000-200000000001", VISITOR_ROLE)
VISITOR_2 = TestIdentity("Visitor-2", "10000000-0000-0000-0000-200000000002", VISITOR_ROLE)
USER_1 = TestIdentity("User-1", "10000000-0000-0000-0000-100000000001", USER_ROLE)
USER_2 = TestIdentity("User-2", "10000000-0000-0000-0000-100000000002", USER_ROLE)
ADMIN_1 = TestIdentity("Admin-1", "10000000-0000-0000-0000-300000000001", ADMIN_ROLE)
ADMIN_2 = TestIdentity("Admin-2", "10000000-0000-0000-0000-300000000002", ADMIN_ROLE)

TEST_IDENTITIES: tuple[TestIdentity, ...] = (
    VISITOR_1,
    VISITOR_2,
    USER_1,
    USER_2,
    ADMIN_1,
    ADMIN_2,
)


def find_identity(identifier: str | uuid.UUID) -> TestIdentity | None:
    if isinstance(identifier, uuid.UUID):
        identifier = str(identifier)
    key = identifier.strip().lower()
    for identity in TEST_IDENTITIES:
        if identity.name.lower() == key or identity.id == key:
            return identity
    return None


def get_identity(identifier: str | uuid.UUID) -> Principal:
    """
    Resolve a test identity by name (case-insensitive) or id.

    Unknown identifiers, including "None", resolve to the anonymous principal.
    """

    identity = find_identity(identifier)
    return identity.to_principal() if identity is not None else ANONYMOUS


def identity_names() -> list[str]:
    return [NO_IDENTITY, *(i.name for i in TEST_IDENTITIES)]


def identity_names_by_id() -> dict[str, str]:
    return {i.id: i.name for i in TEST_IDENTITIES}
