import os
import tempfile
from datetime import datetime, timedelta, timezone

import pytest
import pytest_asyncio

# Test configuration must be in place before the app modules are imported
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key")
os.environ.setdefault("MEDIA_UPLOAD_DIR", tempfile.mkdtemp(prefix="media-test-"))

from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from app.core.database import Base, get_db
from app.core.security import create_access_token
from app.main import app
from app.models.alert import Alert, AlertSeverityEnum, AlertTypeEnum
from app.models.notification import Notification, NotificationMethodEnum
from app.models.tenant import Tenant
from app.models.user import User, UserRoleEnum

BASE_TIME = datetime(2025, 9, 25, 12, 0, 0, tzinfo=timezone.utc)


@pytest_asyncio.fixture
async def session_factory():
    """Fresh in-memory database per test"""
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    factory = async_sessionmaker(bind=engine, class_=AsyncSession, expire_on_commit=False)
    yield factory

    await engine.dispose()


@pytest_asyncio.fixture
async def client(session_factory):
    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


@pytest.fixture
def media_dir(tmp_path, monkeypatch):
    from app.core.config import settings

    monkeypatch.setattr(settings, "MEDIA_UPLOAD_DIR", str(tmp_path))
    return tmp_path


# --- Seed helpers ---

async def add_all(session_factory, *objects):
    async with session_factory() as session:
        session.add_all(objects)
        await session.commit()
    return objects


@pytest_asyncio.fixture
async def tenant(session_factory):
    t = Tenant(id="tenant-1", name="Acme", slug="acme")
    await add_all(session_factory, t)
    return t


@pytest_asyncio.fixture
async def other_tenant(session_factory):
    t = Tenant(id="tenant-2", name="Globex", slug="globex")
    await add_all(session_factory, t)
    return t


@pytest_asyncio.fixture
async def alice(session_factory, tenant):
    u = User(id="user-alice", email="alice@acme.test", name="Alice", role=UserRoleEnum.tenant_admin, tenant_id=tenant.id)
    await add_all(session_factory, u)
    return u


@pytest_asyncio.fixture
async def bob(session_factory, tenant):
    u = User(id="user-bob", email="bob@acme.test", name="Bob", role=UserRoleEnum.user, tenant_id=tenant.id)
    await add_all(session_factory, u)
    return u


@pytest_asyncio.fixture
async def alert(session_factory, tenant):
    a = Alert(
        id="alert-1",
        type=AlertTypeEnum.quota_warning,
        severity=AlertSeverityEnum.medium,
        title="Quota at 80%",
        message="You have used 80% of your monthly messages",
        tenant_id=tenant.id,
    )
    await add_all(session_factory, a)
    return a


def auth_headers(user, tenant_id=None):
    token = create_access_token(user.id, tenant_id=tenant_id or user.tenant_id)
    return {"Authorization": f"Bearer {token}"}


def make_notification(user, alert, minutes=0, read=False, method=NotificationMethodEnum.in_app, **kwargs):
    created_at = BASE_TIME + timedelta(minutes=minutes)
    return Notification(
        user_id=user.id,
        alert_id=alert.id,
        method=method,
        read=read,
        read_at=created_at + timedelta(seconds=30) if read else None,
        created_at=created_at,
        updated_at=created_at,
        **kwargs,
    )


async def get_notification(session_factory, notification_id):
    async with session_factory() as session:
        return await session.get(Notification, notification_id)
