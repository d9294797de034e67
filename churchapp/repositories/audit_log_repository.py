from datetime import datetime
from typing import Optional
from sqlalchemy.orm import Session

from churchapp.models.audit_log import AuditAction, AuditLog


class AuditLogRepository:
    """
    Repository for AuditLog reads.

    Rows are written by PermissionRepository.replace so that an audit entry
    commits together with the change it describes.
    """

    def __init__(self, db: Session):
        self.db = db

    def get_with_filters(
        self,
        church_id: str,
        branch_id: Optional[str] = None,
        action: Optional[AuditAction] = None,
        entity_id: Optional[str] = None,
        user_id: Optional[str] = None,
        start_date: Optional[datetime] = None,
        end_date: Optional[datetime] = None,
        limit: int = 100,
        offset: int = 0,
    ) -> tuple[list[AuditLog], int]:
        """
        Get audit entries with filters, ensuring tenant isolation.

        Returns:
            Tuple of (entries list, total count), newest first
        """
        query = self.db.query(AuditLog).filter(AuditLog.church_id == church_id)

        if branch_id is not None:
            query = query.filter(AuditLog.branch_id == branch_id)

        if action is not None:
            query = query.filter(AuditLog.action == action)

        if entity_id is not None:
            query = query.filter(AuditLog.entity_id == entity_id)

        if user_id is not None:
            query = query.filter(AuditLog.user_id == user_id)

        if start_date is not None:
            query = query.filter(AuditLog.created_at >= start_date)

        if end_date is not None:
            query = query.filter(AuditLog.created_at <= end_date)

        total = query.count()

        logs = (
            query.order_by(AuditLog.created_at.desc())
            .limit(limit)
            .offset(offset)
            .all()
        )

        return logs, total
