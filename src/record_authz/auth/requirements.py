"""
record_authz.auth.requirements

Requirement kinds referenced by policies.

Responsibilities:
- Name each category of authorization check. Kinds carry no configuration;
  all decision logic lives in the handlers registered for them.
"""

from __future__ import annotations

import enum


class RequirementKind(enum.StrEnum):
    # Role-tier checks.
    admin_tier = "admin-tier"
    user_tier = "user-tier"
    visitor_tier = "visitor-tier"

    # Record checks (owner OR privileged role).
    record_editor = "record-editor"
    record_manager = "record-manager"

    admin_area = "admin-area"
