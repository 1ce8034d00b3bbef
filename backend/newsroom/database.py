from typing import Annotated, AsyncGenerator

from fastapi import Depends, Path

from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession
from sqlalchemy.orm import declarative_base, sessionmaker

from .config import settings

Base = declarative_base()


def _connect_args() -> dict:
    # asyncpg 전용 옵션: SQLite(aiosqlite)에는 ssl 인자를 넘기지 않는다
    if settings.DATABASE_URL.startswith("postgresql"):
        return {"ssl": settings.POSTGRES_SSLMODE == "require"}
    return {}


engine = create_async_engine(
    settings.DATABASE_URL,
    pool_pre_ping=True,               # 연결 사전 체크
    pool_recycle=1800,                # 30분마다 재연결
    connect_args=_connect_args(),
)

async_session_factory = sessionmaker(
    engine, class_=AsyncSession, expire_on_commit=False
)

async def get_db() -> AsyncGenerator[AsyncSession, None]:
    async with async_session_factory() as sess:  # 종료 시 미커밋 트랜잭션은 롤백
        yield sess

# Annotated 별칭: 다른 모듈에서 `db: SessionDep` 만 적으면 세션이 주입됩니다.
SessionDep = Annotated[AsyncSession, Depends(get_db)]

# PK 는 INTEGER(int32). 범위 밖 id 는 DB 에 닿기 전에 검증 에러(400)로 처리
MAX_ROW_ID = 2**31 - 1
RowId = Annotated[int, Path(ge=1, le=MAX_ROW_ID)]
