"""
Pydantic schemas for official document API requests/responses.
"""
from datetime import date, datetime
from typing import Literal
from pydantic import BaseModel, ConfigDict, Field, field_validator


DocumentDirection = Literal["CV Đi", "CV Đến"]


def normalize_groups(value: str | None) -> str | None:
    """Trim each comma-separated tag and drop empty ones."""
    if value is None:
        return None
    tags = [tag.strip() for tag in value.split(",") if tag.strip()]
    return ", ".join(tags) if tags else None


class CongVanBase(BaseModel):
    """Base schema for official documents."""
    loai_cong_van: DocumentDirection
    so_hieu: str = Field(..., min_length=1, max_length=100)
    ten_cong_van: str = Field(..., min_length=1, max_length=500)
    noi_dung: str | None = None
    co_quan_ban_hanh: str | None = Field(None, max_length=255)
    ngay_ban_hanh: date
    phan_nhom: str | None = Field(None, max_length=500)
    file_dinh_kem: str | None = None
    ghi_chu: str | None = None

    @field_validator("phan_nhom")
    @classmethod
    def clean_groups(cls, v: str | None) -> str | None:
        return normalize_groups(v)


class CongVanCreate(CongVanBase):
    """Schema for creating an official document."""


class CongVanUpdate(BaseModel):
    """Schema for updating an official document; ``created_by`` is not editable."""
    loai_cong_van: DocumentDirection | None = None
    so_hieu: str | None = Field(None, min_length=1, max_length=100)
    ten_cong_van: str | None = Field(None, min_length=1, max_length=500)
    noi_dung: str | None = None
    co_quan_ban_hanh: str | None = Field(None, max_length=255)
    ngay_ban_hanh: date | None = None
    phan_nhom: str | None = Field(None, max_length=500)
    file_dinh_kem: str | None = None
    ghi_chu: str | None = None

    @field_validator("phan_nhom")
    @classmethod
    def clean_groups(cls, v: str | None) -> str | None:
        return normalize_groups(v)

    @field_validator("loai_cong_van", "so_hieu", "ten_cong_van", "ngay_ban_hanh")
    @classmethod
    def reject_null(cls, v):
        if v is None:
            raise ValueError("Field cannot be null")
        return v


class CongVanResponse(CongVanBase):
    """Schema for official document response."""
    id: int
    created_by: str | None = None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class CongVanSuggestions(BaseModel):
    """Autocomplete values gathered from stored documents."""
    co_quan_ban_hanh: list[str] = []
    phan_nhom: list[str] = []
