from datetime import date
from typing import Optional
from fastapi import APIRouter, Depends, status, Query
from sqlalchemy.orm import Session

from churchapp.database import get_db
from churchapp.dependencies import get_tenant_context
from churchapp.models.finance import FinanceType
from churchapp.models.tenant_context import TenantContext
from churchapp.services.finance_service import FinanceService
from churchapp.schemas.finance_schemas import FinanceCreate, FinanceListResponse, FinanceResponse

router = APIRouter()


@router.post("/", response_model=FinanceResponse, status_code=status.HTTP_201_CREATED)
def create_entry(
    entry_data: FinanceCreate,
    context: TenantContext = Depends(get_tenant_context),
    db: Session = Depends(get_db),
):
    """
    Record a finance entry in the caller's branch.

    - Requires COORDINATOR or higher and finances_manage
    - Date defaults to today
    """
    return FinanceService(db).create_entry(entry_data, context)


@router.get("/", response_model=FinanceListResponse)
def list_entries(
    type: Optional[FinanceType] = Query(None, description="ENTRY or EXIT"),
    start_date: Optional[date] = Query(None, description="Start date (inclusive)"),
    end_date: Optional[date] = Query(None, description="End date (inclusive)"),
    limit: int = Query(100, ge=1, le=1000, description="Max results"),
    offset: int = Query(0, ge=0, description="Pagination offset"),
    context: TenantContext = Depends(get_tenant_context),
    db: Session = Depends(get_db),
):
    """
    List finance entries.

    - ADMINGERAL sees the whole church, everyone else their own branch
    - Results sorted by date (newest first)
    """
    entries, total = FinanceService(db).list_entries(
        context=context,
        entry_type=type,
        start_date=start_date,
        end_date=end_date,
        limit=limit,
        offset=offset,
    )
    return FinanceListResponse(entries=entries, total=total, limit=limit, offset=offset)


@router.get("/{entry_id}", response_model=FinanceResponse)
def get_entry(
    entry_id: str,
    context: TenantContext = Depends(get_tenant_context),
    db: Session = Depends(get_db),
):
    """
    Get a finance entry by ID.

    - Returns 404 if it doesn't exist or belongs to another church
    """
    return FinanceService(db).get_entry(entry_id, context)


@router.delete("/{entry_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_entry(
    entry_id: str,
    context: TenantContext = Depends(get_tenant_context),
    db: Session = Depends(get_db),
):
    """
    Delete a finance entry.

    - Requires COORDINATOR or higher and finances_manage
    """
    FinanceService(db).delete_entry(entry_id, context)
