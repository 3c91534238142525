"""
Process-wide cache of permission rows keyed by role.

Every consumer resolving permissions for the same role shares one load.
Any successful permission write clears the cache.
"""
from typing import Optional

from ward_admin.features.permissions.schemas import PermissionRecord
from ward_admin.features.permissions.service import RoleLoader
from ward_admin.utils import get_logger


log = get_logger(__name__)


class PermissionCache:
    """Role → tuple of detached permission records."""

    def __init__(self):
        self._by_role: dict[str, tuple[PermissionRecord, ...]] = {}
        self._generation = 0
        self.loads = 0

    def peek(self, role: str) -> Optional[tuple[PermissionRecord, ...]]:
        return self._by_role.get(role)

    async def get_role(self, role: str, loader: RoleLoader) -> tuple[PermissionRecord, ...]:
        """
        Rows for ``role``, loading them on first use.

        A failing loader leaves the cache untouched and the error propagates.
        Rows from a load that overlapped an ``invalidate()`` are returned to
        the caller but not cached.
        """
        cached = self._by_role.get(role)
        if cached is not None:
            return cached

        generation = self._generation
        records = tuple(await loader(role))
        self.loads += 1
        if generation != self._generation:
            log.debug("Discarding permission rows for role %r loaded across an invalidation", role)
            return records

        self._by_role[role] = records
        log.debug("Cached %d permission rows for role %r", len(records), role)
        return records

    def invalidate(self, role: Optional[str] = None) -> None:
        """Drop one role, or everything when ``role`` is None."""
        self._generation += 1
        if role is None:
            self._by_role.clear()
        else:
            self._by_role.pop(role, None)
        log.debug("Permission cache invalidated (%s)", role or "all roles")
