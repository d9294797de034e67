from datetime import datetime
from typing import Any
from pydantic import BaseModel
from churchapp.models.audit_log import AuditAction


class AuditLogResponse(BaseModel):
    id: str
    church_id: str
    branch_id: str | None
    action: AuditAction
    entity_type: str
    entity_id: str | None
    user_id: str
    user_email: str | None
    user_role: str | None
    description: str
    details: dict[str, Any] | None
    created_at: datetime

    model_config = {"from_attributes": True}


class AuditLogListResponse(BaseModel):
    logs: list[AuditLogResponse]
    total: int
    limit: int
    offset: int
