from datetime import datetime
from pydantic import BaseModel, Field


class BranchCreate(BaseModel):
    """Schema for creating a new branch in the caller's church"""

    name: str = Field(..., min_length=1, max_length=255)


class BranchResponse(BaseModel):
    """Schema for branch response"""

    id: str
    church_id: str
    name: str
    is_main_branch: bool
    created_at: datetime

    model_config = {"from_attributes": True}


class BranchListResponse(BaseModel):
    branches: list[BranchResponse]
    total: int
