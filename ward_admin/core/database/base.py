"""
SQLAlchemy declarative base and common model utilities.

All SQLAlchemy models should inherit from Base.
"""
from datetime import datetime
from sqlalchemy import DateTime, String, func
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    """
    Base class for all SQLAlchemy models.

    Usage:
        from ward_admin.core.database.base import Base

        class CongVan(Base):
            __tablename__ = "cong_van"

            id: Mapped[int] = mapped_column(primary_key=True)
            so_hieu: Mapped[str] = mapped_column(String(100))
    """
    pass


class TimestampMixin:
    """
    Mixin to add created_at and updated_at timestamps to models.

    Usage:
        class Reward(Base, TimestampMixin):
            __tablename__ = "khen_thuong"
            id: Mapped[int] = mapped_column(primary_key=True)
    """
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )


class OwnedMixin:
    """
    Mixin for records that remember who created them.

    ``created_by`` holds the creating user's id. It is stamped once on insert
    and never rewritten by update routes.
    """
    created_by: Mapped[str | None] = mapped_column(String(26), nullable=True, index=True)
