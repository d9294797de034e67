from typing import Literal
from pydantic import BaseModel, EmailStr, Field
from churchapp.models.role import Role


class TokenClaims(BaseModel):
    """
    Claims carried by every access token.

    Field names are the wire names. memberId/role/branchId/churchId are
    null for a user that has no Member yet.
    """

    sub: str
    email: str
    name: str
    type: Literal["user", "member"]
    memberId: str | None = None
    role: Role | None = None
    branchId: str | None = None
    churchId: str | None = None
    permissions: list[str] = Field(default_factory=list)
    onboardingCompleted: bool = False


class RegisterRequest(BaseModel):
    """Create a user account"""

    email: EmailStr
    password: str = Field(..., min_length=6, max_length=128)
    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str | None = Field(None, max_length=100)


class LoginRequest(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=1)


class UserResponse(BaseModel):
    id: str
    email: str
    first_name: str
    last_name: str | None

    model_config = {"from_attributes": True}


class AuthResponse(BaseModel):
    """Token plus the user it was issued for"""

    token: str
    type: Literal["user", "member"]
    user: UserResponse


class ContextResponse(BaseModel):
    """Resolved tenant context of the caller"""

    user_id: str
    email: str
    name: str
    member_id: str | None
    role: Role | None
    branch_id: str | None
    church_id: str | None
    permissions: list[str]
    effective_permissions: list[str]
    onboarding_completed: bool
    complete: bool
