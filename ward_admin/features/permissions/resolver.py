"""
Turns (user, module) into the effective permission view.
"""
from typing import Any

from sqlalchemy.exc import SQLAlchemyError

from ward_admin.features.permissions.access import is_superuser, view_for_module
from ward_admin.features.permissions.cache import PermissionCache
from ward_admin.features.permissions.schemas import PermissionView
from ward_admin.features.permissions.service import RoleLoader
from ward_admin.utils import get_logger


log = get_logger(__name__)


class PermissionResolver:
    """
    Resolve module permissions for a user.

    Fails closed: no user, no stored row, or a failed load all produce a view
    with every flag off. Admins get every flag without touching the store.
    """

    def __init__(self, cache: PermissionCache, loader: RoleLoader):
        self.cache = cache
        self.loader = loader

    async def resolve(self, user: Any, module_key: str) -> PermissionView:
        if user is None:
            return PermissionView.none()
        if is_superuser(user):
            return PermissionView.full()

        try:
            records = await self.cache.get_role(user.role, self.loader)
        except SQLAlchemyError:
            log.exception("Could not load permissions for role %r", user.role)
            return PermissionView.none()

        return view_for_module(records, module_key)
