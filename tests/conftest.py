"""
测试夹具：使用 aiosqlite 内存数据库替代 PostgreSQL
"""
from typing import Optional

import httpx
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

import app.models  # noqa: F401  注册所有模型
from app.db.database import Base, get_db
from app.models.user import User, UserStatus
from app.utils.auth import ClientContext
from app.utils.password import hash_password

TEST_CONTEXT = ClientContext(user_agent="pytest-agent", ip="127.0.0.1")


@pytest_asyncio.fixture
async def engine():
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def session_factory(engine):
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


@pytest_asyncio.fixture
async def client(session_factory):
    from main import app

    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as c:
        yield c
    app.dependency_overrides.clear()


async def create_user(
    session_factory,
    username: str = "tester",
    password: str = "123123",
    status: int = UserStatus.INIT,
    phone: Optional[str] = None,
    email: Optional[str] = None,
) -> str:
    """直接写库创建用户，返回用户ID"""
    async with session_factory() as db:
        async with db.begin():
            user = User(
                username=username,
                nickname=username,
                password=hash_password(password),
                status=status,
                phone=phone,
                email=email,
            )
            db.add(user)
            await db.flush()
            return user.id
