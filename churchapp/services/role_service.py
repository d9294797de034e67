"""
Role transitions.

Upgrades keep grants unchanged; downgrades keep
(current ∩ allowed(new role)) ∪ {members_view}. Role update and grant
pruning are committed together.
"""

from sqlalchemy.orm import Session

from churchapp.core.exceptions import ForbiddenException
from churchapp.core.logging import get_logger
from churchapp.core.role_policy import (
    ASSIGNER_ROLE_FLOOR,
    parse_role,
    retained_on_role_change,
    role_rank,
)
from churchapp.models.member import Member
from churchapp.models.role import Role
from churchapp.models.tenant_context import TenantContext
from churchapp.repositories.permission_repository import PermissionRepository
from churchapp.services.audit_service import role_changed_entry
from churchapp.services.permission_service import PermissionService
from churchapp.services.requester_context import refresh_requester_context

logger = get_logger(__name__)


class RoleService:
    """Service layer for member role changes"""

    def __init__(self, db: Session):
        self.db = db
        self.permission_repo = PermissionRepository(db)
        self.permissions = PermissionService(db)

    def change_role(
        self, member_id: str, new_role_value: str, context: TenantContext
    ) -> Member:
        """
        Change a member's role, pruning grants on downgrade.

        Args:
            member_id: Target member
            new_role_value: Requested role identifier
            context: Caller context

        Returns:
            Updated member (the caller is never the target, so their token
            stays valid)

        Raises:
            ValidationException: If the role is unknown
            NotFoundException: If no member has this ID
            ForbiddenException: Cross-tenant target, requester below
                ADMINFILIAL, own role, or an ADMINFILIAL assigning or changing
                a role at ADMINFILIAL or above
        """
        new_role = parse_role(new_role_value)
        requester = refresh_requester_context(self.db, context)
        target = self.permissions.load_target(member_id, requester)

        if target.id == requester.member_id:
            raise ForbiddenException("Cannot change your own role")

        # Branch administrators only move members between MEMBER and COORDINATOR
        if requester.role != Role.ADMINGERAL and (
            role_rank(new_role) >= role_rank(ASSIGNER_ROLE_FLOOR)
            or role_rank(target.role) >= role_rank(ASSIGNER_ROLE_FLOOR)
        ):
            raise ForbiddenException("Branch administrators can only assign COORDINATOR or MEMBER")

        current_role = target.role
        if new_role == current_role:
            return target

        current = self.permission_repo.get_types(target.id)
        if role_rank(new_role) > role_rank(current_role):
            retained = current
        else:
            retained = retained_on_role_change(new_role, current)

        target.role = new_role
        entry = role_changed_entry(requester, target, current_role, new_role)
        _, removed = self.permission_repo.replace(target, retained, audit_entry=entry)

        logger.info(
            "Role changed",
            member_id=target.id,
            by_member_id=requester.member_id,
            from_role=current_role.value,
            to_role=new_role.value,
            pruned=sorted(removed),
        )
        return target
