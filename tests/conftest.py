"""
tests.conftest

Shared fixtures for authorization tests.
"""

from __future__ import annotations

import pytest

from record_authz.auth.app_policies import build_app_registry
from record_authz.auth.evaluator import Authorizer
from record_authz.auth.identities import ADMIN_1, USER_1, USER_2, VISITOR_1
from record_authz.auth.models import Principal, ResourceAuthFields


@pytest.fixture
def authorizer() -> Authorizer:
    return Authorizer(build_app_registry())


@pytest.fixture
def user1() -> Principal:
    return USER_1.to_principal()


@pytest.fixture
def user2() -> Principal:
    return USER_2.to_principal()


@pytest.fixture
def admin1() -> Principal:
    return ADMIN_1.to_principal()


@pytest.fixture
def visitor1() -> Principal:
    return VISITOR_1.to_principal()


@pytest.fixture
def user1_record() -> ResourceAuthFields:
    return ResourceAuthFields(owner_id=USER_1.id)
