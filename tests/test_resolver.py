"""Tests for the permission resolver and its role cache."""

import asyncio
from types import SimpleNamespace

import pytest
from sqlalchemy.exc import OperationalError

from ward_admin.features.permissions.cache import PermissionCache
from ward_admin.features.permissions.resolver import PermissionResolver
from ward_admin.features.permissions.schemas import PermissionRecord, PermissionView


MANAGER_ROWS = [
    PermissionRecord(id=1, role="manager", module="cong-van",
                     can_view=True, can_add=True, can_edit=False, can_delete=False),
    PermissionRecord(id=2, role="manager", module="rewards",
                     can_view=False, can_add=False, can_edit=True, can_delete=False),
]


class FakeLoader:
    """Role loader backed by a dict, counting calls."""

    def __init__(self, rows_by_role=None, error=None):
        self.rows_by_role = rows_by_role or {}
        self.error = error
        self.calls = []

    async def __call__(self, role):
        self.calls.append(role)
        if self.error is not None:
            raise self.error
        return self.rows_by_role.get(role, [])


def user(role, user_id="u1"):
    return SimpleNamespace(id=user_id, role=role)


@pytest.fixture
def loader():
    return FakeLoader({"manager": MANAGER_ROWS})


@pytest.fixture
def resolver(loader):
    return PermissionResolver(PermissionCache(), loader)


class TestPermissionResolver:
    """Test cases for PermissionResolver.resolve."""

    async def test_anonymous_gets_nothing(self, resolver, loader):
        assert await resolver.resolve(None, "cong-van") == PermissionView.none()
        assert loader.calls == []

    async def test_admin_gets_everything_without_lookup(self, resolver, loader):
        view = await resolver.resolve(user("admin"), "cong-van")
        assert view == PermissionView.full()
        assert await resolver.resolve(user("admin"), "not-a-module") == PermissionView.full()
        assert loader.calls == []

    async def test_stored_flags_returned_verbatim(self, resolver):
        view = await resolver.resolve(user("manager"), "cong-van")
        assert view == PermissionView(can_view=True, can_add=True, can_edit=False, can_delete=False)

    async def test_edit_without_view_is_not_rewritten(self, resolver):
        view = await resolver.resolve(user("manager"), "rewards")
        assert view.can_view is False
        assert view.can_edit is True

    async def test_missing_row_gets_nothing(self, resolver):
        assert await resolver.resolve(user("manager"), "assets") == PermissionView.none()

    async def test_role_without_rows_gets_nothing(self, resolver):
        assert await resolver.resolve(user("user"), "cong-van") == PermissionView.none()

    async def test_repeated_resolution_is_stable(self, resolver, loader):
        first = await resolver.resolve(user("manager"), "cong-van")
        second = await resolver.resolve(user("manager", "u2"), "cong-van")
        assert first == second
        assert loader.calls == ["manager"]

    async def test_load_failure_fails_closed(self):
        failing = FakeLoader(error=OperationalError("SELECT", {}, Exception("db down")))
        cache = PermissionCache()
        resolver = PermissionResolver(cache, failing)

        assert await resolver.resolve(user("manager"), "cong-van") == PermissionView.none()
        assert cache.peek("manager") is None

    async def test_failure_is_not_cached(self):
        cache = PermissionCache()
        failing = FakeLoader(error=OperationalError("SELECT", {}, Exception("db down")))
        await PermissionResolver(cache, failing).resolve(user("manager"), "cong-van")

        healthy = FakeLoader({"manager": MANAGER_ROWS})
        view = await PermissionResolver(cache, healthy).resolve(user("manager"), "cong-van")
        assert view.can_add is True


class TestPermissionCache:
    """Test cases for PermissionCache."""

    async def test_one_load_per_role(self, loader):
        cache = PermissionCache()
        await cache.get_role("manager", loader)
        await cache.get_role("manager", loader)
        await cache.get_role("user", loader)
        assert cache.loads == 2
        assert loader.calls == ["manager", "user"]

    async def test_invalidate_all(self, loader):
        cache = PermissionCache()
        await cache.get_role("manager", loader)
        await cache.get_role("user", loader)
        cache.invalidate()
        assert cache.peek("manager") is None
        assert cache.peek("user") is None

    async def test_invalidate_one_role(self, loader):
        cache = PermissionCache()
        await cache.get_role("manager", loader)
        await cache.get_role("user", loader)
        cache.invalidate("user")
        assert cache.peek("manager") is not None
        assert cache.peek("user") is None

    async def test_reload_after_invalidate(self, loader):
        cache = PermissionCache()
        await cache.get_role("manager", loader)
        cache.invalidate()
        await cache.get_role("manager", loader)
        assert loader.calls == ["manager", "manager"]

    async def test_load_overlapping_invalidate_is_not_cached(self):
        """Rows read before a permission write must not outlive its invalidation."""
        started = asyncio.Event()
        release = asyncio.Event()

        async def gated_loader(role):
            started.set()
            await release.wait()
            return MANAGER_ROWS

        cache = PermissionCache()
        pending = asyncio.create_task(cache.get_role("manager", gated_loader))
        await started.wait()

        cache.invalidate()
        release.set()

        assert await pending == tuple(MANAGER_ROWS)
        assert cache.peek("manager") is None

    async def test_load_after_invalidate_is_cached(self, loader):
        cache = PermissionCache()
        cache.invalidate()
        await cache.get_role("manager", loader)
        assert cache.peek("manager") == tuple(MANAGER_ROWS)
