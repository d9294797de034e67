from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from churchapp.database import get_db
from churchapp.dependencies import get_tenant_context
from churchapp.models.tenant_context import TenantContext
from churchapp.services.branch_service import BranchService
from churchapp.services.plan_limits import PlanLimits, get_plan_limits
from churchapp.schemas.branch_schemas import BranchCreate, BranchListResponse, BranchResponse

router = APIRouter()


@router.post("/", response_model=BranchResponse, status_code=status.HTTP_201_CREATED)
def create_branch(
    branch_data: BranchCreate,
    context: TenantContext = Depends(get_tenant_context),
    limits: PlanLimits = Depends(get_plan_limits),
    db: Session = Depends(get_db),
):
    """
    Create a branch in the caller's church.

    - Requires ADMINGERAL
    - Returns 403 when the plan's branch limit is reached
    """
    return BranchService(db, limits).create_branch(branch_data, context)


@router.get("/", response_model=BranchListResponse)
def list_branches(
    context: TenantContext = Depends(get_tenant_context),
    db: Session = Depends(get_db),
):
    """List branches of the caller's church, main branch first"""
    branches = BranchService(db).list_branches(context)
    return BranchListResponse(branches=branches, total=len(branches))


@router.get("/{branch_id}", response_model=BranchResponse)
def get_branch(
    branch_id: str,
    context: TenantContext = Depends(get_tenant_context),
    db: Session = Depends(get_db),
):
    return BranchService(db).get_branch(branch_id, context)


@router.delete("/{branch_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_branch(
    branch_id: str,
    context: TenantContext = Depends(get_tenant_context),
    db: Session = Depends(get_db),
):
    """
    Delete a branch.

    - Requires ADMINGERAL
    - The main branch and branches with members cannot be deleted (400)
    """
    BranchService(db).delete_branch(branch_id, context)
