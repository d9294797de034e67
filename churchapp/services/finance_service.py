from datetime import date
from typing import Optional
from sqlalchemy.orm import Session

from churchapp.core import access
from churchapp.core.exceptions import NotFoundException
from churchapp.core.logging import get_logger
from churchapp.core.role_policy import PermissionType
from churchapp.models.finance import FinanceEntry, FinanceType
from churchapp.models.role import Role
from churchapp.models.tenant_context import TenantContext
from churchapp.repositories.finance_repository import FinanceRepository
from churchapp.schemas.finance_schemas import FinanceCreate

logger = get_logger(__name__)


class FinanceService:
    """
    Service layer for finance entries.

    Cross-tenant lookups answer NotFound (the entry is filtered by church
    in the query), unlike churches and members which answer Forbidden.
    """

    def __init__(self, db: Session):
        self.db = db
        self.repo = FinanceRepository(db)

    def create_entry(self, data: FinanceCreate, context: TenantContext) -> FinanceEntry:
        """
        Record a finance entry in the caller's branch.

        Requires COORDINATOR or higher and finances_manage.
        """
        access.authorize(
            context, min_role=Role.COORDINATOR, permission=PermissionType.FINANCES_MANAGE
        )
        entry = FinanceEntry(
            church_id=context.church_id,
            branch_id=context.branch_id,
            created_by_member_id=context.member_id,
            title=data.title,
            amount=data.amount,
            type=data.type,
            category=data.category,
            description=data.description,
            date=data.date or date.today(),
        )
        entry = self.repo.create(entry)
        logger.info("Finance entry created", entry_id=entry.id, church_id=entry.church_id)
        return entry

    def get_entry(self, entry_id: str, context: TenantContext) -> FinanceEntry:
        """
        Get a finance entry of the caller's church.

        Raises:
            NotFoundException: If not found or it belongs to another church
        """
        access.authorize(context)
        entry = self.repo.get_by_id_and_church(entry_id, context.church_id)
        if not entry:
            raise NotFoundException("Finance entry not found")
        access.authorize(context, church_id=entry.church_id, branch_id=entry.branch_id, branch_scoped=True)
        return entry

    def list_entries(
        self,
        context: TenantContext,
        entry_type: Optional[FinanceType] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        limit: int = 100,
        offset: int = 0,
    ) -> tuple[list[FinanceEntry], int]:
        """Entries of the caller's church (ADMINGERAL) or branch (others)"""
        scope = access.list_scope(context)
        return self.repo.get_with_filters(
            church_id=scope.church_id,
            branch_id=scope.branch_id,
            entry_type=entry_type,
            start_date=start_date,
            end_date=end_date,
            limit=limit,
            offset=offset,
        )

    def delete_entry(self, entry_id: str, context: TenantContext) -> None:
        """Delete a finance entry (COORDINATOR+ with finances_manage)"""
        entry = self.get_entry(entry_id, context)
        access.authorize(
            context,
            church_id=entry.church_id,
            min_role=Role.COORDINATOR,
            permission=PermissionType.FINANCES_MANAGE,
        )
        self.repo.delete(entry)
        logger.info("Finance entry deleted", entry_id=entry_id, church_id=context.church_id)
