import itertools
import os
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict

import pytest

from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from httpx import AsyncClient, ASGITransport

# 테스트용 환경 변수 세팅 (newsroom 모듈 임포트 전에 적용)
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("JWT_SECRET_KEY", "test-secret")
os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("MAIL_ENABLED", "false")
os.environ.setdefault("RESET_TOKEN_IN_RESPONSE", "false")

# sys.path에 backend 추가하여 'newsroom' 패키지 검색 가능하게 함
backend_path = Path(__file__).resolve().parents[1]
if str(backend_path) not in sys.path:
    sys.path.insert(0, str(backend_path))

from newsroom.main import app
from newsroom.database import Base
from newsroom.database import get_db as real_get_db
from newsroom.auth import service as auth_service
from newsroom.categories.models import Category
from newsroom.users import service as user_service
from newsroom.users.models import Role


@dataclass
class Account:
    """테스트에서 쓰는 사용자 정보. ORM 객체 대신 값만 보관 (세션 롤백 후 만료 방지)."""
    id: int
    email: str
    role: Role
    password: str
    headers: Dict[str, str] = field(default_factory=dict)


@pytest.fixture()
async def test_engine():
    # 메모리 SQLite. StaticPool 로 모든 세션이 같은 연결(=같은 DB)을 공유
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture()
async def db(test_engine):
    async_session = sessionmaker(test_engine, class_=AsyncSession, expire_on_commit=False)
    async with async_session() as session:
        yield session


@pytest.fixture(autouse=True)
async def override_db(db):
    async def _get_db():
        yield db
    app.dependency_overrides[real_get_db] = _get_db
    yield
    app.dependency_overrides.clear()


@pytest.fixture()
async def client():
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest.fixture()
def make_user(db):
    counter = itertools.count(1)

    async def _make(role: Role = Role.USER, email: str | None = None, password: str = "secret123") -> Account:
        n = next(counter)
        email = email or f"{role.value.lower()}{n}@x.com"
        user = await user_service.create_user(
            db, email=email, username=f"{role.value.lower()}{n}", password=password, role=role
        )
        token = auth_service.create_access_token(user)
        return Account(
            id=user.id,
            email=user.email,
            role=role,
            password=password,
            headers={"Authorization": f"Bearer {token}"},
        )

    return _make


@pytest.fixture()
async def editor(make_user) -> Account:
    return await make_user(Role.EDITOR)


@pytest.fixture()
async def journalist(make_user) -> Account:
    return await make_user(Role.JOURNALIST)


@pytest.fixture()
async def other_journalist(make_user) -> Account:
    return await make_user(Role.JOURNALIST)


@pytest.fixture()
async def reader(make_user) -> Account:
    return await make_user(Role.USER)


@pytest.fixture()
def make_category(db):
    async def _make(name: str) -> int:
        category = Category(name=name)
        db.add(category)
        await db.commit()
        return category.id

    return _make


@pytest.fixture()
async def category_id(make_category) -> int:
    return await make_category("Football")


@pytest.fixture()
def make_article(client, category_id):
    async def _make(author: Account, **overrides) -> dict:
        payload = {
            "title": "Untitled story",
            "content": "Body text",
            "categoryId": category_id,
        }
        payload.update(overrides)
        resp = await client.post("/api/articles", json=payload, headers=author.headers)
        assert resp.status_code == 201, resp.text
        return resp.json()

    return _make
