"""
FastAPI dependencies for module permissions and record ownership.

Module permissions and ownership are separate checks. A route that edits an
owned record asks for both:

    @router.put("/{item_id}")
    async def update_item(
        item_id: int,
        db: AsyncSession = Depends(get_db),
        current_user: User = Depends(require_module_action("cong-van", "edit")),
    ):
        item = ...
        ensure_can_modify(item, current_user)
"""
from typing import Any
from fastapi import Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from ward_admin.core.database.engine import get_db
from ward_admin.features.permissions.access import can_modify
from ward_admin.features.permissions.cache import PermissionCache
from ward_admin.features.permissions.resolver import PermissionResolver
from ward_admin.features.permissions.schemas import ModuleAction
from ward_admin.features.permissions.service import role_loader
from ward_admin.features.users.dependencies import get_current_user
from ward_admin.features.users.models import User
from ward_admin.utils import get_logger


log = get_logger(__name__)

_permission_cache = PermissionCache()


def get_permission_cache() -> PermissionCache:
    """The process-wide permission cache."""
    return _permission_cache


async def get_permission_resolver(
    db: AsyncSession = Depends(get_db),
    cache: PermissionCache = Depends(get_permission_cache),
) -> PermissionResolver:
    return PermissionResolver(cache, role_loader(db))


def require_module_action(module_key: str, action: ModuleAction):
    """
    Dependency requiring ``action`` on ``module_key``.

    Returns:
        Dependency function that returns the current user if allowed

    Raises:
        HTTPException: 403 if the role lacks the action
    """
    async def module_action_dependency(
        current_user: User = Depends(get_current_user),
        resolver: PermissionResolver = Depends(get_permission_resolver),
    ) -> User:
        view = await resolver.resolve(current_user, module_key)
        if not view.allows(action):
            log.debug("User %s denied %s on %s", current_user.id, action, module_key)
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"Permission denied: {action} on {module_key}"
            )
        return current_user

    return module_action_dependency


def require_any_module_action(module_key: str, actions: list[ModuleAction]):
    """
    Dependency requiring ANY of ``actions`` on ``module_key``.

    Usage:
        @router.post("/upload")
        async def upload(user: User = Depends(require_any_module_action("rewards", ["add", "edit"]))):
            ...
    """
    async def module_any_action_dependency(
        current_user: User = Depends(get_current_user),
        resolver: PermissionResolver = Depends(get_permission_resolver),
    ) -> User:
        view = await resolver.resolve(current_user, module_key)
        if any(view.allows(action) for action in actions):
            return current_user

        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=f"Permission denied: requires one of {actions} on {module_key}"
        )

    return module_any_action_dependency


def ensure_can_modify(record: Any, user: User) -> None:
    """
    Raise 403 unless ``user`` may edit or delete ``record``.

    Raises:
        HTTPException: 403 when the record belongs to someone else
    """
    if not can_modify(record, user):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="You can only modify records you created"
        )
