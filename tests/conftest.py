import os

os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite://")
os.environ.setdefault("FRONTEND_URL", "https://frontend.test")

from types import SimpleNamespace

import httpx
import pytest
import pytest_asyncio
from redis.exceptions import ConnectionError as RedisConnectionError
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.pool import StaticPool

from app.api.routes import auth_routes
from app.core.dependencies import get_llm_client, get_redis_client
from app.data.database import Base, get_db
from app.main import app
from app.services.auth_services import hash_password
from app.services.database.user_database_services import create_user


class FakeRedis:
    """In-memory stand-in for the handful of redis.asyncio calls the app makes."""

    def __init__(self):
        self.store = {}
        self.fail_writes = False

    async def get(self, key):
        return self.store.get(key)

    async def getdel(self, key):
        return self.store.pop(key, None)

    async def set(self, key, value, ex=None):
        if self.fail_writes:
            raise RedisConnectionError("Connection refused")
        self.store[key] = value
        return True

    async def delete(self, *keys):
        removed = 0
        for key in keys:
            if self.store.pop(key, None) is not None:
                removed += 1
        return removed

    async def aclose(self):
        pass


class FakeModels:
    def __init__(self, text=None, error=None):
        self.text = text
        self.error = error
        self.calls = []

    async def generate_content(self, model, contents, config=None):
        self.calls.append({"model": model, "contents": contents, "config": config})
        if self.error:
            raise self.error
        return SimpleNamespace(text=self.text)


def make_llm_client(text="A quiet thread runs through the week.", error=None):
    models = FakeModels(text=text, error=error)
    return SimpleNamespace(aio=SimpleNamespace(models=models)), models


@pytest.fixture
def fake_redis():
    return FakeRedis()


@pytest_asyncio.fixture
async def engine():
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def db(engine):
    session = AsyncSession(engine, expire_on_commit=False)
    try:
        yield session
    finally:
        await session.close()


@pytest_asyncio.fixture
async def user(db):
    return await create_user(db, "reader@example.com", hash_password("quiet-week"), email_confirmed=True)


@pytest_asyncio.fixture
async def client(engine, fake_redis):
    async def override_get_db():
        session = AsyncSession(engine, expire_on_commit=False)
        try:
            yield session
        finally:
            await session.close()

    async def override_get_redis_client():
        yield fake_redis

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_redis_client] = override_get_redis_client
    app.dependency_overrides[get_llm_client] = lambda: None
    app.dependency_overrides[auth_routes.signup_rate_limiter] = lambda: None

    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="https://localhost") as http_client:
        yield http_client

    app.dependency_overrides.clear()


@pytest.fixture
def llm_factory():
    return make_llm_client
