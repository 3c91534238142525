"""
Reward / discipline (khen thưởng - kỷ luật) SQLAlchemy model.
"""
from datetime import date
from sqlalchemy import Date, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from ward_admin.core.database.base import Base, OwnedMixin, TimestampMixin


class Reward(Base, TimestampMixin, OwnedMixin):
    """
    A reward or disciplinary action granted to a unit or an individual.

    Attributes:
        loaikt: Kind, "Khen thưởng" (reward) or "Kỷ luật" (discipline)
        capkt: Granting level (ward, hospital, ministry, ...)
        htkt: Form of the reward or sanction
        ldkt: Reason
        qdkt: Number of the decision that granted it
        namkt: Date of the decision
        dv: Receiving unit or person
        image: Public URL of the scanned decision
    """
    __tablename__ = "khen_thuong"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    loaikt: Mapped[str] = mapped_column(String(50), nullable=False, index=True)
    capkt: Mapped[str | None] = mapped_column(String(255), nullable=True, index=True)
    htkt: Mapped[str | None] = mapped_column(String(500), nullable=True)
    ldkt: Mapped[str | None] = mapped_column(Text, nullable=True)
    qdkt: Mapped[str | None] = mapped_column(String(100), nullable=True, index=True)
    namkt: Mapped[date | None] = mapped_column(Date, nullable=True)
    dv: Mapped[str] = mapped_column(String(255), nullable=False)
    image: Mapped[str | None] = mapped_column(String(1000), nullable=True)

    def __repr__(self) -> str:
        return f"<Reward(id={self.id}, loaikt={self.loaikt!r}, dv={self.dv!r})>"
