"""Pytest configuration and shared fixtures."""

import asyncio
from datetime import datetime
from typing import Optional

import pytest
import pytest_asyncio
from fastapi import HTTPException
from fastapi.testclient import TestClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

from ward_admin.core.database.engine import get_db, init_db
from ward_admin.core.rate_limit import limiter
from ward_admin.core.storage import get_cong_van_storage, get_rewards_storage
from ward_admin.features.permissions.cache import PermissionCache
from ward_admin.features.permissions.dependencies import get_permission_cache
from ward_admin.features.permissions.models import ModulePermission
from ward_admin.features.users.dependencies import get_current_user, get_optional_user
from ward_admin.features.users.models import User
from ward_admin.main import app


def make_user(user_id: str = "u1", role: str = "user") -> User:
    """Transient user object; routes only read ``id`` and ``role``."""
    return User(
        id=user_id,
        appwrite_id=f"aw-{user_id}",
        email=f"{user_id}@benhvien.vn",
        name=user_id,
        role=role,
        is_active=True,
        created_at=datetime(2024, 1, 1),
        updated_at=datetime(2024, 1, 1),
    )


def grant(role: str, module: str, view=False, add=False, edit=False, delete=False) -> ModulePermission:
    return ModulePermission(
        role=role, module=module,
        can_view=view, can_add=add, can_edit=edit, can_delete=delete,
    )


class FakeUploader:
    """Stands in for an Appwrite bucket."""

    def __init__(self, bucket_id: str):
        self.bucket_id = bucket_id
        self.uploads: list[tuple[str, bytes]] = []

    async def upload(self, filename: str, content: bytes) -> str:
        self.uploads.append((filename, content))
        return f"https://files.test/{self.bucket_id}/{filename}"


class AuthState:
    """Who the test client is signed in as; None means anonymous."""

    def __init__(self):
        self.user: Optional[User] = None

    def login(self, user_id: str = "u1", role: str = "user") -> User:
        self.user = make_user(user_id, role)
        return self.user

    def logout(self) -> None:
        self.user = None


@pytest_asyncio.fixture
async def db_session(tmp_path):
    """Session on a fresh SQLite database with every table created."""
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'service.db'}", poolclass=NullPool)
    await init_db(engine)
    maker = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with maker() as session:
        yield session
    await engine.dispose()


@pytest.fixture
def test_engine(tmp_path):
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'api.db'}", poolclass=NullPool)
    asyncio.run(init_db(engine))
    yield engine
    asyncio.run(engine.dispose())


@pytest.fixture
def session_maker(test_engine):
    return async_sessionmaker(test_engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
def seed(session_maker):
    """Insert ORM objects into the API test database."""
    def _seed(*objects):
        async def _insert():
            async with session_maker() as session:
                session.add_all(objects)
                await session.commit()
                return [getattr(o, "id", None) for o in objects]
        return asyncio.run(_insert())
    return _seed


@pytest.fixture
def auth():
    return AuthState()


@pytest.fixture
def permission_cache():
    return PermissionCache()


@pytest.fixture
def uploaders():
    return {
        "cong_van": FakeUploader("cong_van_file"),
        "rewards": FakeUploader("ktkl"),
    }


@pytest.fixture
def client(session_maker, auth, permission_cache, uploaders):
    """Test client with database, identity, cache and storage overridden."""
    async def override_get_db():
        async with session_maker() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    def override_current_user():
        if auth.user is None:
            raise HTTPException(status_code=401, detail="Not authenticated")
        return auth.user

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_current_user] = override_current_user
    app.dependency_overrides[get_optional_user] = lambda: auth.user
    app.dependency_overrides[get_permission_cache] = lambda: permission_cache
    app.dependency_overrides[get_cong_van_storage] = lambda: uploaders["cong_van"]
    app.dependency_overrides[get_rewards_storage] = lambda: uploaders["rewards"]
    limiter.reset()

    yield TestClient(app)

    app.dependency_overrides.clear()
