from datetime import datetime
from typing import Optional
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from churchapp.database import get_db
from churchapp.dependencies import get_tenant_context
from churchapp.models.audit_log import AuditAction
from churchapp.models.tenant_context import TenantContext
from churchapp.services.audit_service import AuditService
from churchapp.schemas.audit_schemas import AuditLogListResponse

router = APIRouter()


@router.get("/", response_model=AuditLogListResponse)
def list_audit_logs(
    action: Optional[AuditAction] = Query(None, description="Recorded action"),
    entity_id: Optional[str] = Query(None, description="Affected entity ID"),
    user_id: Optional[str] = Query(None, description="Acting user ID"),
    branch_id: Optional[str] = Query(None, description="Branch of the affected entity"),
    start_date: Optional[datetime] = Query(None, description="Start (inclusive)"),
    end_date: Optional[datetime] = Query(None, description="End (inclusive)"),
    limit: int = Query(100, ge=1, le=1000, description="Max results"),
    offset: int = Query(0, ge=0, description="Pagination offset"),
    context: TenantContext = Depends(get_tenant_context),
    db: Session = Depends(get_db),
):
    """
    List role and permission changes of the caller's church.

    - ADMINGERAL only
    - Results sorted by time (newest first)
    """
    logs, total = AuditService(db).list_logs(
        context=context,
        action=action,
        entity_id=entity_id,
        user_id=user_id,
        branch_id=branch_id,
        start_date=start_date,
        end_date=end_date,
        limit=limit,
        offset=offset,
    )
    return AuditLogListResponse(logs=logs, total=total, limit=limit, offset=offset)
