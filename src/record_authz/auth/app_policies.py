"""
record_authz.auth.app_policies

Standard application roles and policies.

Responsibilities:
- Name the roles and policies the application checks against.
- Provide the composition root that registers policies and handlers once at startup.
"""

from __future__ import annotations

from record_authz.auth.handlers import OwnershipHandler, RoleTierHandler
from record_authz.auth.policy import PolicyRegistry
from record_authz.auth.requirements import RequirementKind

ADMIN_ROLE = "AdminRole"
USER_ROLE = "UserRole"
VISITOR_ROLE = "VisitorRole"

IS_ADMIN_POLICY = "IsAdminPolicy"
IS_USER_POLICY = "IsUserPolicy"
IS_VISITOR_POLICY = "IsVisitor"
IS_EDITOR_POLICY = "IsEditorPolicy"
IS_MANAGER_POLICY = "IsManagerPolicy"
IS_VIEWER_POLICY = "IsViewerPolicy"
IS_ADMIN_AREA_POLICY = "IsAdminAreaPolicy"


def register_app_policies(registry: PolicyRegistry) -> None:
    # Role-only policies.
    registry.register_policy(IS_ADMIN_POLICY, [RequirementKind.admin_tier])
    registry.register_policy(IS_USER_POLICY, [RequirementKind.user_tier])
    registry.register_policy(IS_VISITOR_POLICY, [RequirementKind.visitor_tier])
    registry.register_policy(IS_ADMIN_AREA_POLICY, [RequirementKind.admin_area])

    # Record policies: the owner OR an admin may act.
    registry.register_policy(IS_EDITOR_POLICY, [RequirementKind.record_editor])
    registry.register_policy(IS_MANAGER_POLICY, [RequirementKind.record_manager])

    # Any signed-in identity.
    registry.register_policy(IS_VIEWER_POLICY, [])


def register_app_handlers(registry: PolicyRegistry) -> None:
    admin_only = RoleTierHandler.of(ADMIN_ROLE)
    owner = OwnershipHandler("owner_id")

    registry.register_handler(RequirementKind.admin_tier, admin_only)
    registry.register_handler(RequirementKind.user_tier, RoleTierHandler.of(ADMIN_ROLE, USER_ROLE))
    registry.register_handler(
        RequirementKind.visitor_tier,
        RoleTierHandler.of(ADMIN_ROLE, USER_ROLE, VISITOR_ROLE),
    )
    registry.register_handler(RequirementKind.admin_area, admin_only)

    registry.register_handler(RequirementKind.record_editor, owner)
    registry.register_handler(RequirementKind.record_editor, admin_only)
    registry.register_handler(RequirementKind.record_manager, owner)
    registry.register_handler(RequirementKind.record_manager, admin_only)


def build_app_registry() -> PolicyRegistry:
    registry = PolicyRegistry()
    register_app_policies(registry)
    register_app_handlers(registry)
    return registry.freeze()


# --- Module Notes -----------------------------------------------------------
# Editor and manager are separate kinds with identical wiring today so each can
# diverge (e.g. assignees may edit but not delete) without touching callers.
