"""
Pydantic schemas for reward / discipline API requests/responses.
"""
from datetime import date, datetime
from typing import List
from pydantic import BaseModel, ConfigDict, Field, field_validator


class RewardBase(BaseModel):
    """Base schema for rewards and disciplinary actions."""
    loaikt: str = Field(..., min_length=1, max_length=50)
    capkt: str | None = Field(None, max_length=255)
    htkt: str | None = Field(None, max_length=500)
    ldkt: str | None = None
    qdkt: str | None = Field(None, max_length=100)
    namkt: date | None = None
    dv: str = Field(..., min_length=1, max_length=255)
    image: str | None = None


class RewardCreate(RewardBase):
    """Schema for creating a reward."""


class RewardUpdate(BaseModel):
    """Schema for updating a reward; ``created_by`` is not editable."""
    loaikt: str | None = Field(None, min_length=1, max_length=50)
    capkt: str | None = Field(None, max_length=255)
    htkt: str | None = Field(None, max_length=500)
    ldkt: str | None = None
    qdkt: str | None = Field(None, max_length=100)
    namkt: date | None = None
    dv: str | None = Field(None, min_length=1, max_length=255)
    image: str | None = None

    @field_validator("loaikt", "dv")
    @classmethod
    def reject_null(cls, v):
        if v is None:
            raise ValueError("Field cannot be null")
        return v


class RewardResponse(RewardBase):
    """Schema for reward response."""
    id: int
    created_by: str | None = None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class RewardListResponse(BaseModel):
    """Schema for paginated reward list."""
    items: List[RewardResponse]
    total: int
    page: int
    page_size: int
    pages: int


class RewardBulkCreate(BaseModel):
    """Schema for inserting many rewards at once."""
    items: List[RewardCreate] = Field(..., min_length=1, max_length=1000)
