"""
Official document (công văn) SQLAlchemy model.
"""
from datetime import date
from sqlalchemy import Date, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from ward_admin.core.database.base import Base, OwnedMixin, TimestampMixin


class CongVan(Base, TimestampMixin, OwnedMixin):
    """
    An incoming or outgoing official document.

    Attributes:
        loai_cong_van: Direction, "CV Đi" (outgoing) or "CV Đến" (incoming)
        so_hieu: Document number
        ten_cong_van: Title
        noi_dung: Summary of contents
        co_quan_ban_hanh: Issuing body
        ngay_ban_hanh: Issue date
        phan_nhom: Comma-separated group tags
        file_dinh_kem: Public URL of the attachment
        ghi_chu: Free-form note
        created_by: Id of the user who entered the document
    """
    __tablename__ = "cong_van"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    loai_cong_van: Mapped[str] = mapped_column(String(20), nullable=False, index=True)
    so_hieu: Mapped[str] = mapped_column(String(100), nullable=False, index=True)
    ten_cong_van: Mapped[str] = mapped_column(String(500), nullable=False)
    noi_dung: Mapped[str | None] = mapped_column(Text, nullable=True)
    co_quan_ban_hanh: Mapped[str | None] = mapped_column(String(255), nullable=True)
    ngay_ban_hanh: Mapped[date] = mapped_column(Date, nullable=False, index=True)
    phan_nhom: Mapped[str | None] = mapped_column(String(500), nullable=True)
    file_dinh_kem: Mapped[str | None] = mapped_column(String(1000), nullable=True)
    ghi_chu: Mapped[str | None] = mapped_column(Text, nullable=True)

    def __repr__(self) -> str:
        return f"<CongVan(id={self.id}, so_hieu={self.so_hieu!r})>"
