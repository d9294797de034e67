from datetime import date as date_type, datetime
from pydantic import BaseModel, Field
from churchapp.models.finance import FinanceType


class FinanceCreate(BaseModel):
    """Schema for recording a finance entry in the caller's branch"""

    title: str = Field(..., min_length=1, max_length=255)
    amount: float = Field(..., gt=0)
    type: FinanceType
    category: str | None = Field(None, max_length=100)
    description: str | None = None
    date: date_type | None = None


class FinanceResponse(BaseModel):
    id: str
    church_id: str
    branch_id: str
    created_by_member_id: str | None
    title: str
    amount: float
    type: FinanceType
    category: str | None
    description: str | None
    date: date_type
    created_at: datetime

    model_config = {"from_attributes": True}


class FinanceListResponse(BaseModel):
    entries: list[FinanceResponse]
    total: int
    limit: int
    offset: int
