from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session

from churchapp.database import get_db
from churchapp.dependencies import get_tenant_context
from churchapp.models.tenant_context import TenantContext
from churchapp.services.church_service import ChurchService
from churchapp.schemas.church_schemas import (
    ChurchCreate,
    ChurchCreateResponse,
    ChurchResponse,
    ChurchUpdate,
    FounderMemberResponse,
)

router = APIRouter()


@router.post("/", response_model=ChurchCreateResponse, status_code=status.HTTP_201_CREATED)
def create_church(
    church_data: ChurchCreate,
    response: Response,
    context: TenantContext = Depends(get_tenant_context),
    db: Session = Depends(get_db),
):
    """
    Create a church during onboarding.

    - Creates the main branch and makes the caller ADMINGERAL with every permission
    - Idempotent: a caller who already founded a church gets it back (200)
    - Returns a fresh "member" token
    """
    service = ChurchService(db)
    church, branch, member, token, created = service.create_church(church_data, context)
    if not created:
        response.status_code = status.HTTP_200_OK

    return ChurchCreateResponse(
        church=church,
        branch=branch,
        member=FounderMemberResponse(
            id=member.id,
            role=member.role,
            branch_id=member.branch_id,
            permissions=member.permission_types,
        ),
        token=token,
    )


@router.get("/", response_model=list[ChurchResponse])
def list_churches(
    context: TenantContext = Depends(get_tenant_context),
    db: Session = Depends(get_db),
):
    """List churches visible to the caller (only their own)"""
    return ChurchService(db).list_churches(context)


@router.get("/{church_id}", response_model=ChurchResponse)
def get_church(
    church_id: str,
    context: TenantContext = Depends(get_tenant_context),
    db: Session = Depends(get_db),
):
    """
    Get a church by ID.

    - Returns 404 if it doesn't exist, 403 if it belongs to another tenant
    """
    return ChurchService(db).get_church(church_id, context)


@router.patch("/{church_id}", response_model=ChurchResponse)
def update_church(
    church_id: str,
    church_data: ChurchUpdate,
    context: TenantContext = Depends(get_tenant_context),
    db: Session = Depends(get_db),
):
    """
    Update church details.

    - Requires church_manage
    """
    return ChurchService(db).update_church(church_id, church_data, context)


@router.delete("/{church_id}", response_model=ChurchResponse)
def deactivate_church(
    church_id: str,
    context: TenantContext = Depends(get_tenant_context),
    db: Session = Depends(get_db),
):
    """
    Deactivate a church (soft delete).

    - Requires ADMINGERAL
    """
    return ChurchService(db).deactivate_church(church_id, context)
