"""
Permission management API routes.

Provides the module registry, the per-role permission grid, the caller's
effective permissions and the single-flag toggle used by administrators.
"""
from typing import List, Optional
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.requests import Request

from ward_admin.core.database.engine import get_db
from ward_admin.core.rate_limit import limiter, permission_write_limit
from ward_admin.features.permissions.access import ADMIN_ROLE, admin_record
from ward_admin.features.permissions.cache import PermissionCache
from ward_admin.features.permissions.dependencies import (
    get_permission_cache,
    get_permission_resolver,
)
from ward_admin.features.permissions.registry import MODULES, get_module
from ward_admin.features.permissions.resolver import PermissionResolver
from ward_admin.features.permissions.schemas import (
    ModuleDefResponse,
    PermissionFieldUpdate,
    PermissionMatrixResponse,
    PermissionRecord,
    PermissionView,
)
from ward_admin.features.permissions.service import (
    InvalidPermissionFieldError,
    PermissionNotFoundError,
    ReadOnlyPermissionError,
    fetch_all_permissions,
    role_loader,
    update_permission_field,
)
from ward_admin.features.permissions.state import PermissionMatrix
from ward_admin.features.users.dependencies import get_current_admin_user, get_optional_user
from ward_admin.features.users.models import User
from ward_admin.utils import get_logger


log = get_logger(__name__)
router = APIRouter()


@router.get("", response_model=List[PermissionRecord])
async def list_permissions(
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_admin_user)
):
    """List every stored permission row (admin only)."""
    return await fetch_all_permissions(db)


@router.get("/modules", response_model=List[ModuleDefResponse])
async def list_modules():
    """List the application modules in display order."""
    return [ModuleDefResponse(key=m.key, label=m.label, level=m.level) for m in MODULES]


@router.get("/modules/{module_key}", response_model=ModuleDefResponse)
async def get_module_def(module_key: str):
    module = get_module(module_key)
    if module is None:
        raise HTTPException(status_code=404, detail="Module not found")
    return ModuleDefResponse(key=module.key, label=module.label, level=module.level)


@router.get("/roles/{role}", response_model=List[PermissionRecord])
async def list_role_permissions(
    role: str,
    db: AsyncSession = Depends(get_db),
    cache: PermissionCache = Depends(get_permission_cache),
    current_user: User = Depends(get_current_admin_user)
):
    """List the stored rows of one role (admin only)."""
    return list(await cache.get_role(role, role_loader(db)))


@router.get("/matrix/{role}", response_model=PermissionMatrixResponse)
async def get_permission_matrix(
    role: str,
    db: AsyncSession = Depends(get_db),
    cache: PermissionCache = Depends(get_permission_cache),
    current_user: User = Depends(get_current_admin_user)
):
    """
    Permission grid for one role (admin only).

    Modules without a stored row come back with ``permission: null``. The
    admin role is never stored and gets read-only full-access rows.
    """
    if role == ADMIN_ROLE:
        records = tuple(admin_record(module.key) for module in MODULES)
    else:
        records = await cache.get_role(role, role_loader(db))
    return PermissionMatrixResponse(role=role, rows=PermissionMatrix(records).rows(role))


@router.get("/me/{module_key}", response_model=PermissionView)
async def get_my_permissions(
    module_key: str,
    user: Optional[User] = Depends(get_optional_user),
    resolver: PermissionResolver = Depends(get_permission_resolver),
):
    """Effective permissions of the caller on a module."""
    return await resolver.resolve(user, module_key)


@router.patch("/{permission_id}", response_model=PermissionRecord)
@limiter.limit(permission_write_limit)
async def set_permission(
    request: Request,
    permission_id: int,
    update: PermissionFieldUpdate,
    db: AsyncSession = Depends(get_db),
    cache: PermissionCache = Depends(get_permission_cache),
    current_user: User = Depends(get_current_admin_user)
):
    """Set a single flag on a permission row (admin only)."""
    try:
        permission = await update_permission_field(db, permission_id, update.field, update.value)
    except PermissionNotFoundError:
        raise HTTPException(status_code=404, detail="Permission not found")
    except ReadOnlyPermissionError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except InvalidPermissionFieldError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    cache.invalidate()
    log.info("User %s set %s=%s on permission %s", current_user.id, update.field, update.value, permission_id)
    return permission
