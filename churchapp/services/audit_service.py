"""
Audit trail for role and permission changes.

Entries are built here and handed to PermissionRepository.replace, which
commits them with the change they describe. A rejected change therefore
leaves no entry.
"""

from datetime import datetime
from typing import Optional
from sqlalchemy.orm import Session

from churchapp.core import access
from churchapp.core.logging import get_logger
from churchapp.models.audit_log import AuditAction, AuditLog
from churchapp.models.member import Member
from churchapp.models.role import Role
from churchapp.models.tenant_context import TenantContext
from churchapp.repositories.audit_log_repository import AuditLogRepository

logger = get_logger(__name__)

MEMBER_ENTITY = "Member"


def _entry(
    actor: TenantContext,
    target: Member,
    action: AuditAction,
    description: str,
    details: dict,
) -> AuditLog:
    return AuditLog(
        church_id=target.church_id,
        branch_id=target.branch_id,
        action=action,
        entity_type=MEMBER_ENTITY,
        entity_id=target.id,
        user_id=actor.user_id,
        user_email=actor.email,
        user_role=actor.role.value if actor.role else None,
        description=description,
        details=details,
    )


def role_changed_entry(actor: TenantContext, target: Member, old_role: Role, new_role: Role) -> AuditLog:
    return _entry(
        actor,
        target,
        AuditAction.MEMBER_ROLE_CHANGED,
        f"Role alterado de {old_role.value} para {new_role.value}",
        {"oldRole": old_role.value, "newRole": new_role.value},
    )


def permissions_changed_entry(actor: TenantContext, target: Member, permissions: set[str]) -> AuditLog:
    return _entry(
        actor,
        target,
        AuditAction.MEMBER_PERMISSIONS_CHANGED,
        f"Permissões alteradas para membro {target.id}",
        {"permissions": sorted(permissions)},
    )


class AuditService:
    """Service layer for reading the audit trail"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = AuditLogRepository(db)

    def list_logs(
        self,
        context: TenantContext,
        action: Optional[AuditAction] = None,
        entity_id: Optional[str] = None,
        user_id: Optional[str] = None,
        branch_id: Optional[str] = None,
        start_date: Optional[datetime] = None,
        end_date: Optional[datetime] = None,
        limit: int = 100,
        offset: int = 0,
    ) -> tuple[list[AuditLog], int]:
        """
        Audit entries of the caller's church, newest first.

        Raises:
            ForbiddenException: If the caller is not ADMINGERAL
        """
        access.authorize(context, min_role=Role.ADMINGERAL)
        scope = access.list_scope(context)
        logs, total = self.repo.get_with_filters(
            church_id=scope.church_id,
            branch_id=scope.branch_id or branch_id,
            action=action,
            entity_id=entity_id,
            user_id=user_id,
            start_date=start_date,
            end_date=end_date,
            limit=limit,
            offset=offset,
        )
        logger.debug("Audit logs listed", church_id=scope.church_id, total=total)
        return logs, total
