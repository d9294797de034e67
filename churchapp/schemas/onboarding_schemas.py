from datetime import datetime
from enum import Enum as PyEnum
from pydantic import BaseModel
from churchapp.models.role import Role


class OnboardingStatus(str, PyEnum):
    NEW = "NEW"
    PENDING = "PENDING"
    COMPLETE = "COMPLETE"


class OnboardingChurch(BaseModel):
    id: str
    name: str
    address: str | None = None


class OnboardingBranch(BaseModel):
    id: str
    name: str


class OnboardingMember(BaseModel):
    id: str
    role: Role
    branch_id: str


class OnboardingStateResponse(BaseModel):
    status: OnboardingStatus
    church: OnboardingChurch | None = None
    branch: OnboardingBranch | None = None
    member: OnboardingMember | None = None


class OnboardingProgressResponse(BaseModel):
    church_configured: bool
    branches_configured: bool
    settings_configured: bool
    completed: bool
    completed_at: datetime | None

    model_config = {"from_attributes": True}


class OnboardingCompleteResponse(BaseModel):
    completed: bool
    completed_at: datetime | None
    token: str
