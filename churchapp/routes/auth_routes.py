from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from churchapp.database import get_db
from churchapp.dependencies import get_tenant_context
from churchapp.models.tenant_context import TenantContext
from churchapp.models.user import User
from churchapp.services.auth_service import AuthService
from churchapp.schemas.auth_schemas import (
    AuthResponse,
    ContextResponse,
    LoginRequest,
    RegisterRequest,
)

router = APIRouter()


def _auth_response(user: User, token: str) -> AuthResponse:
    return AuthResponse(
        token=token,
        type="member" if user.member is not None else "user",
        user=user,
    )


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
def register(data: RegisterRequest, db: Session = Depends(get_db)):
    """
    Create a user account.

    - Returns a "user" token (no church yet)
    - Returns 400 if the e-mail is already registered
    """
    user, token = AuthService(db).register(data)
    return _auth_response(user, token)


@router.post("/login", response_model=AuthResponse)
def login(data: LoginRequest, db: Session = Depends(get_db)):
    """
    Exchange credentials for a token.

    - Claims reflect the stored membership, role and grants
    """
    user, token = AuthService(db).login(data.email, data.password)
    return _auth_response(user, token)


@router.post("/refresh", response_model=AuthResponse)
def refresh(
    context: TenantContext = Depends(get_tenant_context),
    db: Session = Depends(get_db),
):
    """
    Re-issue the caller's token from current stored state.

    - Picks up role changes and grants made by an administrator
    """
    user, token = AuthService(db).refresh(context.user_id)
    return _auth_response(user, token)


@router.get("/me", response_model=ContextResponse)
def me(context: TenantContext = Depends(get_tenant_context)):
    """Tenant context resolved from the bearer token"""
    return ContextResponse(
        user_id=context.user_id,
        email=context.email,
        name=context.name,
        member_id=context.member_id,
        role=context.role,
        branch_id=context.branch_id,
        church_id=context.church_id,
        permissions=sorted(context.permissions),
        effective_permissions=sorted(context.effective_permissions),
        onboarding_completed=context.onboarding_completed,
        complete=context.is_complete,
    )
