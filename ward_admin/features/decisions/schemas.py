"""
Pydantic schemas for Decision API requests/responses.
"""
from datetime import date, datetime
from typing import List
from pydantic import BaseModel, ConfigDict, Field, field_validator


class DecisionBase(BaseModel):
    """Base schema for decisions."""
    so_quyet_dinh: str = Field(..., min_length=1, max_length=100)
    loai_qd: str = Field(..., min_length=1, max_length=50)
    cap_quyet_dinh: str | None = Field(None, max_length=255)
    ngay_ky: date
    noi_dung: str = Field(..., min_length=1)
    ghi_chu: str | None = None
    file_quyet_dinh: str | None = None


class DecisionCreate(DecisionBase):
    """Schema for creating a decision."""


class DecisionUpdate(BaseModel):
    """Schema for updating a decision."""
    so_quyet_dinh: str | None = Field(None, min_length=1, max_length=100)
    loai_qd: str | None = Field(None, min_length=1, max_length=50)
    cap_quyet_dinh: str | None = Field(None, max_length=255)
    ngay_ky: date | None = None
    noi_dung: str | None = Field(None, min_length=1)
    ghi_chu: str | None = None
    file_quyet_dinh: str | None = None

    @field_validator("so_quyet_dinh", "loai_qd", "ngay_ky", "noi_dung")
    @classmethod
    def reject_null(cls, v):
        if v is None:
            raise ValueError("Field cannot be null")
        return v


class DecisionResponse(DecisionBase):
    """Schema for decision response."""
    id: int
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class DecisionListResponse(BaseModel):
    """Schema for paginated decision list."""
    items: List[DecisionResponse]
    total: int
    page: int
    page_size: int
    pages: int
