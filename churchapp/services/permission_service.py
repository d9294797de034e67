"""
Permission grant resolution.

Validates a requested permission set against the target member's role and
replaces the member's grants with it (full-replace, members_view always
kept).
"""

from sqlalchemy.orm import Session

from churchapp.core import access
from churchapp.core.exceptions import ForbiddenException, NotFoundException
from churchapp.core.logging import get_logger
from churchapp.core.role_policy import (
    ALWAYS_GRANTED,
    ASSIGNER_ROLE_FLOOR,
    PERMISSION_CATALOG,
    parse_permissions,
    rejected_for_role,
)
from churchapp.models.member import Member
from churchapp.models.tenant_context import TenantContext
from churchapp.repositories.member_repository import MemberRepository
from churchapp.repositories.permission_repository import PermissionRepository
from churchapp.services.audit_service import permissions_changed_entry
from churchapp.services.requester_context import refresh_requester_context
from churchapp.services.token_service import TokenService

logger = get_logger(__name__)


def restricted_rejection_message(role_value: str, rejected: list[str]) -> str:
    return f"Membros com role {role_value} não podem receber as permissões: {', '.join(rejected)}"


class PermissionService:
    """Service layer for permission grants"""

    def __init__(self, db: Session):
        self.db = db
        self.member_repo = MemberRepository(db)
        self.permission_repo = PermissionRepository(db)
        self.tokens = TokenService(db)

    @staticmethod
    def list_catalog() -> list[dict]:
        """All grantable permission types with their restricted flag"""
        return [
            {"type": permission.value, "restricted": restricted}
            for permission, restricted in PERMISSION_CATALOG.items()
        ]

    def load_target(self, member_id: str, requester: TenantContext) -> Member:
        """
        Lock and return the target member after tenant and role-floor checks.

        Raises:
            NotFoundException: If no member has this ID
            ForbiddenException: Cross-tenant target, requester below
                ADMINFILIAL, or ADMINFILIAL acting outside their branch
        """
        target = self.member_repo.get_by_id_for_update(member_id)
        if not target:
            raise NotFoundException("Member not found")

        access.authorize(
            requester,
            church_id=target.church_id,
            branch_id=target.branch_id,
            branch_scoped=True,
            min_role=ASSIGNER_ROLE_FLOOR,
        )
        return target

    def assign_permissions(
        self, member_id: str, requested: list[str], context: TenantContext
    ) -> tuple[Member, str | None]:
        """
        Replace a member's permission grants.

        Args:
            member_id: Target member
            requested: Full replacement set of permission types
            context: Caller context

        Returns:
            (updated member, fresh token if the caller changed their own grants)

        Raises:
            ValidationException: If a permission type is unknown
            ForbiddenException: See load_target, or restricted permissions
                requested for a target below COORDINATOR
        """
        requester = refresh_requester_context(self.db, context)
        target = self.load_target(member_id, requester)

        parsed = parse_permissions(requested)
        rejected = rejected_for_role(target.role, parsed)
        if rejected:
            logger.warning(
                "Restricted permissions rejected",
                member_id=target.id,
                role=target.role.value,
                rejected=rejected,
            )
            raise ForbiddenException(restricted_rejection_message(target.role.value, rejected))

        desired = {p.value for p in parsed} | {ALWAYS_GRANTED.value}
        entry = permissions_changed_entry(requester, target, desired)
        added, removed = self.permission_repo.replace(target, desired, audit_entry=entry)
        logger.info(
            "Permissions replaced",
            member_id=target.id,
            by_member_id=requester.member_id,
            added=sorted(added),
            removed=sorted(removed),
        )

        token = None
        if target.id == requester.member_id:
            token = self.tokens.issue_for_user_id(target.user_id)
        return target, token
