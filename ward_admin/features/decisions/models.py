"""
Decision (quyết định) SQLAlchemy model.
"""
from datetime import date
from sqlalchemy import Date, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from ward_admin.core.database.base import Base, TimestampMixin


class Decision(Base, TimestampMixin):
    """
    A signed reward or discipline decision.

    Decisions are managed under the ``rewards`` module and carry no owner:
    anyone holding the module's edit/delete flags may change any of them.
    """
    __tablename__ = "quyet_dinh"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    so_quyet_dinh: Mapped[str] = mapped_column(String(100), nullable=False, index=True)
    loai_qd: Mapped[str] = mapped_column(String(50), nullable=False, index=True)
    cap_quyet_dinh: Mapped[str | None] = mapped_column(String(255), nullable=True)
    ngay_ky: Mapped[date] = mapped_column(Date, nullable=False, index=True)
    noi_dung: Mapped[str] = mapped_column(Text, nullable=False)
    ghi_chu: Mapped[str | None] = mapped_column(Text, nullable=True)
    file_quyet_dinh: Mapped[str | None] = mapped_column(String(1000), nullable=True)

    def __repr__(self) -> str:
        return f"<Decision(id={self.id}, so_quyet_dinh={self.so_quyet_dinh!r})>"
