from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from churchapp.database import get_db
from churchapp.dependencies import get_tenant_context
from churchapp.models.tenant_context import TenantContext
from churchapp.services.permission_service import PermissionService
from churchapp.schemas.permission_schemas import (
    PermissionAssignRequest,
    PermissionAssignResponse,
    PermissionCatalogEntry,
)

router = APIRouter()


@router.get("/", response_model=list[PermissionCatalogEntry])
def list_permission_types(context: TenantContext = Depends(get_tenant_context)):
    """Grantable permission types; restricted ones need COORDINATOR or higher"""
    return PermissionService.list_catalog()


@router.post("/{member_id}", response_model=PermissionAssignResponse)
def assign_permissions(
    member_id: str,
    data: PermissionAssignRequest,
    context: TenantContext = Depends(get_tenant_context),
    db: Session = Depends(get_db),
):
    """
    Replace a member's permission grants.

    - Requires ADMINFILIAL or higher (ADMINFILIAL: own branch only)
    - members_view is always kept
    - Restricted permissions for a MEMBER target are rejected with 403
    - A new token is returned when the caller changed their own grants
    """
    member, token = PermissionService(db).assign_permissions(member_id, data.permissions, context)
    return PermissionAssignResponse(
        member_id=member.id,
        role=member.role,
        permissions=member.permission_types,
        token=token,
    )
