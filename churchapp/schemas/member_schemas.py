from datetime import datetime
from pydantic import BaseModel, EmailStr, Field
from churchapp.models.role import Role


class MemberCreate(BaseModel):
    """Create a user and bind it to a branch of the caller's church"""

    email: EmailStr
    password: str = Field(..., min_length=6, max_length=128)
    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str | None = Field(None, max_length=100)
    role: str = Field(default=Role.MEMBER.value, description="Role to assign (default: MEMBER)")
    branch_id: str


class MemberRoleUpdate(BaseModel):
    """Change a member's role"""

    role: str = Field(..., description="New role to assign")


class MemberResponse(BaseModel):
    """Member with user details and explicit grants"""

    id: str
    user_id: str
    email: str
    name: str
    role: Role
    branch_id: str
    church_id: str
    permissions: list[str]
    created_at: datetime


class MemberListResponse(BaseModel):
    members: list[MemberResponse]
    total: int


class RoleChangeResponse(BaseModel):
    """Updated role and the pruned or preserved grants"""

    member_id: str
    role: Role
    permissions: list[str]
