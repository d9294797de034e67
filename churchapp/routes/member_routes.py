from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from churchapp.database import get_db
from churchapp.dependencies import get_tenant_context
from churchapp.models.member import Member
from churchapp.models.tenant_context import TenantContext
from churchapp.services.member_service import MemberService
from churchapp.services.plan_limits import PlanLimits, get_plan_limits
from churchapp.services.role_service import RoleService
from churchapp.schemas.member_schemas import (
    MemberCreate,
    MemberListResponse,
    MemberResponse,
    MemberRoleUpdate,
    RoleChangeResponse,
)

router = APIRouter()


def _to_response(member: Member) -> MemberResponse:
    return MemberResponse(
        id=member.id,
        user_id=member.user_id,
        email=member.user.email,
        name=member.user.full_name,
        role=member.role,
        branch_id=member.branch_id,
        church_id=member.church_id,
        permissions=member.permission_types,
        created_at=member.created_at,
    )


@router.post("/", response_model=MemberResponse, status_code=status.HTTP_201_CREATED)
def create_member(
    member_data: MemberCreate,
    context: TenantContext = Depends(get_tenant_context),
    limits: PlanLimits = Depends(get_plan_limits),
    db: Session = Depends(get_db),
):
    """
    Create a user and add it as a member of a branch.

    - ADMINGERAL: any branch, roles up to ADMINFILIAL
    - ADMINFILIAL: own branch, roles up to ADMINFILIAL
    - COORDINATOR with members_manage: own branch, MEMBER only
    - Returns 403 when the plan's member limit is reached
    """
    member = MemberService(db, limits).create_member(member_data, context)
    return _to_response(member)


@router.get("/", response_model=MemberListResponse)
def list_members(
    context: TenantContext = Depends(get_tenant_context),
    db: Session = Depends(get_db),
):
    """
    List members visible to the caller.

    - ADMINGERAL sees the whole church, everyone else their own branch
    """
    members = MemberService(db).list_members(context)
    return MemberListResponse(members=[_to_response(m) for m in members], total=len(members))


@router.get("/{member_id}", response_model=MemberResponse)
def get_member(
    member_id: str,
    context: TenantContext = Depends(get_tenant_context),
    db: Session = Depends(get_db),
):
    """
    Get a member by ID.

    - Returns 404 if it doesn't exist, 403 if it belongs to another tenant
    """
    return _to_response(MemberService(db).get_member(member_id, context))


@router.patch("/{member_id}/role", response_model=RoleChangeResponse)
def change_role(
    member_id: str,
    role_data: MemberRoleUpdate,
    context: TenantContext = Depends(get_tenant_context),
    db: Session = Depends(get_db),
):
    """
    Change a member's role.

    - Requires ADMINFILIAL or higher (ADMINFILIAL: own branch only)
    - Downgrades prune grants the new role may not hold; members_view is kept
    - The target picks up the change on next login or /api/auth/refresh
    """
    member = RoleService(db).change_role(member_id, role_data.role, context)
    return RoleChangeResponse(
        member_id=member.id, role=member.role, permissions=member.permission_types
    )
