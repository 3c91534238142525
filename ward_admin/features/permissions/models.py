"""
Module permission table: one row of four action flags per (role, module).
"""
from sqlalchemy import Boolean, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from ward_admin.core.database.base import Base


class ModulePermission(Base):
    """
    Action flags a role holds on one module.

    Rows are seeded by ``scripts/seed_permissions.py`` and afterwards only
    changed one flag at a time. The flags are independent of each other.
    """
    __tablename__ = "module_permissions"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    role: Mapped[str] = mapped_column(String(50), nullable=False, index=True)
    module: Mapped[str] = mapped_column(String(64), nullable=False, index=True)

    can_view: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    can_add: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    can_edit: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    can_delete: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    __table_args__ = (
        UniqueConstraint("role", "module", name="uq_module_permissions_role_module"),
    )

    def __repr__(self) -> str:
        return f"<ModulePermission(id={self.id}, role={self.role!r}, module={self.module!r})>"
