"""
Pydantic schemas for permission management.
"""
from typing import List, Literal, Optional
from pydantic import BaseModel, ConfigDict, Field


PermissionField = Literal["can_view", "can_add", "can_edit", "can_delete"]
PERMISSION_FIELDS: tuple[str, ...] = ("can_view", "can_add", "can_edit", "can_delete")

ModuleAction = Literal["view", "add", "edit", "delete"]


# ============================================================================
# Permission Schemas
# ============================================================================

class PermissionView(BaseModel):
    """Effective action flags a user holds on one module."""
    can_view: bool = False
    can_add: bool = False
    can_edit: bool = False
    can_delete: bool = False

    model_config = ConfigDict(frozen=True)

    @classmethod
    def none(cls) -> "PermissionView":
        return cls()

    @classmethod
    def full(cls) -> "PermissionView":
        return cls(can_view=True, can_add=True, can_edit=True, can_delete=True)

    def allows(self, action: str) -> bool:
        """
        Whether ``action`` may be carried out on the module.

        Write actions also need ``can_view``: a module the role cannot see
        offers nothing to add, edit or delete.
        """
        if action == "view":
            return self.can_view
        return self.can_view and bool(getattr(self, f"can_{action}"))


class PermissionRecord(PermissionView):
    """A stored permission row, detached from the database session."""
    id: int
    role: str
    module: str

    model_config = ConfigDict(from_attributes=True, frozen=True)

    def view(self) -> PermissionView:
        return PermissionView(
            can_view=self.can_view,
            can_add=self.can_add,
            can_edit=self.can_edit,
            can_delete=self.can_delete,
        )


class PermissionFieldUpdate(BaseModel):
    """Schema for toggling a single flag on a permission row."""
    field: PermissionField = Field(..., description="Flag to change")
    value: bool = Field(..., description="New value of the flag")


# ============================================================================
# Registry / Matrix Schemas
# ============================================================================

class ModuleDefResponse(BaseModel):
    """A module of the application as listed in the registry."""
    key: str
    label: str
    level: int


class PermissionMatrixRow(BaseModel):
    """One line of the permission grid for a role."""
    module: ModuleDefResponse
    permission: Optional[PermissionRecord] = None
    view_locked: bool = False


class PermissionMatrixResponse(BaseModel):
    role: str
    rows: List[PermissionMatrixRow] = []
