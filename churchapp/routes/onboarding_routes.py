from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from churchapp.database import get_db
from churchapp.dependencies import get_tenant_context
from churchapp.models.tenant_context import TenantContext
from churchapp.services.onboarding_service import OnboardingService
from churchapp.schemas.onboarding_schemas import (
    OnboardingCompleteResponse,
    OnboardingProgressResponse,
    OnboardingStateResponse,
)

router = APIRouter()


@router.get("/state", response_model=OnboardingStateResponse)
def get_state(
    context: TenantContext = Depends(get_tenant_context),
    db: Session = Depends(get_db),
):
    """NEW, PENDING or COMPLETE, with church/branch/member once a Member exists"""
    return OnboardingService(db).get_state(context)


@router.get("/progress", response_model=OnboardingProgressResponse)
def get_progress(
    context: TenantContext = Depends(get_tenant_context),
    db: Session = Depends(get_db),
):
    return OnboardingService(db).get_progress(context)


@router.post("/progress/{step}", response_model=OnboardingProgressResponse)
def mark_step(
    step: str,
    context: TenantContext = Depends(get_tenant_context),
    db: Session = Depends(get_db),
):
    """Mark a step (church, branches or settings) as configured"""
    return OnboardingService(db).mark_step_complete(step, context)


@router.post("/complete", response_model=OnboardingCompleteResponse)
def complete(
    context: TenantContext = Depends(get_tenant_context),
    db: Session = Depends(get_db),
):
    """Finish onboarding and return a token with onboardingCompleted=true"""
    progress, token = OnboardingService(db).complete(context)
    return OnboardingCompleteResponse(
        completed=progress.completed, completed_at=progress.completed_at, token=token
    )
