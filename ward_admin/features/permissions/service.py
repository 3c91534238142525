"""
Reads and single-flag writes against the module permission table.
"""
from typing import Awaitable, Callable, Sequence

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ward_admin.features.permissions.access import ADMIN_RECORD_ID
from ward_admin.features.permissions.models import ModulePermission
from ward_admin.features.permissions.schemas import PERMISSION_FIELDS, PermissionRecord
from ward_admin.utils import get_logger


log = get_logger(__name__)

RoleLoader = Callable[[str], Awaitable[Sequence[PermissionRecord]]]


class PermissionStoreError(Exception):
    """Base class for permission store errors."""


class PermissionNotFoundError(PermissionStoreError):
    def __init__(self, permission_id: int):
        super().__init__(f"Permission {permission_id} not found")
        self.permission_id = permission_id


class InvalidPermissionFieldError(PermissionStoreError):
    def __init__(self, field: str):
        super().__init__(f"Unknown permission field: {field!r}")
        self.field = field


class ReadOnlyPermissionError(PermissionStoreError):
    def __init__(self):
        super().__init__("Admin permissions are not stored and cannot be changed")


def validate_field(field: str) -> None:
    if field not in PERMISSION_FIELDS:
        raise InvalidPermissionFieldError(field)


async def fetch_all_permissions(db: AsyncSession) -> list[ModulePermission]:
    """Every stored row, all roles and modules, ordered by module."""
    result = await db.execute(
        select(ModulePermission).order_by(ModulePermission.module, ModulePermission.role)
    )
    return list(result.scalars().all())


async def fetch_permissions_for_role(db: AsyncSession, role: str) -> list[ModulePermission]:
    result = await db.execute(
        select(ModulePermission)
        .where(ModulePermission.role == role)
        .order_by(ModulePermission.module)
    )
    return list(result.scalars().all())


async def update_permission_field(
    db: AsyncSession,
    permission_id: int,
    field: str,
    value: bool,
) -> ModulePermission:
    """
    Set one flag on one row and return the persisted row.

    Raises:
        ReadOnlyPermissionError: for the synthesized admin row
        InvalidPermissionFieldError: if ``field`` is not one of the four flags
        PermissionNotFoundError: if no row has ``permission_id``
    """
    if permission_id == ADMIN_RECORD_ID:
        raise ReadOnlyPermissionError()
    validate_field(field)

    permission = await db.get(ModulePermission, permission_id)
    if permission is None:
        raise PermissionNotFoundError(permission_id)

    setattr(permission, field, value)
    await db.commit()
    await db.refresh(permission)

    log.info(
        "Permission %s (%s/%s) set %s=%s",
        permission.id, permission.role, permission.module, field, value,
    )
    return permission


def role_loader(db: AsyncSession) -> RoleLoader:
    """Loader that reads one role's rows as detached records."""
    async def load(role: str) -> list[PermissionRecord]:
        rows = await fetch_permissions_for_role(db, role)
        return [PermissionRecord.model_validate(row) for row in rows]

    return load


def record_writer(db: AsyncSession) -> Callable[[int, str, bool], Awaitable[PermissionRecord]]:
    """Writer that persists a single flag and returns the stored record."""
    async def write(permission_id: int, field: str, value: bool) -> PermissionRecord:
        row = await update_permission_field(db, permission_id, field, value)
        return PermissionRecord.model_validate(row)

    return write
