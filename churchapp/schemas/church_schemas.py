from pydantic import BaseModel, Field
from datetime import datetime
from churchapp.models.role import Role


class ChurchCreate(BaseModel):
    """Create a church with its main branch (onboarding)"""

    name: str = Field(..., min_length=1, max_length=255)
    address: str | None = Field(None, max_length=255)
    branch_name: str | None = Field(
        None, min_length=1, max_length=255, description="Main branch name (default: Sede)"
    )


class ChurchUpdate(BaseModel):
    """Update church details (church_manage)"""

    name: str | None = Field(None, min_length=1, max_length=255)
    address: str | None = Field(None, max_length=255)


class ChurchResponse(BaseModel):
    id: str
    name: str
    address: str | None
    is_active: bool
    created_by_user_id: str
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class BranchSummary(BaseModel):
    id: str
    name: str
    is_main_branch: bool

    model_config = {"from_attributes": True}


class FounderMemberResponse(BaseModel):
    id: str
    role: Role
    branch_id: str
    permissions: list[str]


class ChurchCreateResponse(BaseModel):
    """Church, main branch and founding member plus a refreshed token"""

    church: ChurchResponse
    branch: BranchSummary
    member: FounderMemberResponse
    token: str
