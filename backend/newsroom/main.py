import logging
import sys
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from .database import Base, engine
from .db_models import *  # noqa: F401,F403
from .config import settings
from .exceptions import register_exception_handlers
from .auth.router import router as auth_router
from .articles.router import router as articles_router
from .categories.router import router as categories_router
from .tags.router import router as tags_router

# 로깅 설정 (Docker 환경 최적화)
log_level = getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO)
logging.basicConfig(
    level=log_level,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    handlers=[
        logging.StreamHandler(sys.stdout)  # stdout으로 명시적 출력
    ]
)

# 권한/발행 흐름 로그는 항상 설정 레벨을 따르도록 지정
logging.getLogger("newsroom.auth").setLevel(log_level)
logging.getLogger("newsroom.articles").setLevel(log_level)

logger = logging.getLogger(__name__)
logger.info(f"Application starting with log level: {settings.LOG_LEVEL}")

@asynccontextmanager
async def lifespan(app: FastAPI):
    if settings.AUTO_CREATE_TABLES:
        # 로컬 개발용. 운영 환경은 alembic 마이그레이션 사용
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info("Database tables created/verified")

    yield
    await engine.dispose()

app = FastAPI(title="Newsroom API", lifespan=lifespan)

# CORS 설정
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)

# 라우터 등록
app.include_router(auth_router)
app.include_router(articles_router)
app.include_router(categories_router)
app.include_router(tags_router)

@app.get("/", tags=["health"])
async def root():
    return {"message": "Newsroom API is running"}

# 간단한 헬스 체크 엔드포인트 (프로덕션 헬스체크 용도)
@app.get("/health", tags=["health"])
async def health():
    return {"status": "ok"}
