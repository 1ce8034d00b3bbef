import logging
from datetime import datetime
from typing import Optional

from sqlalchemy import func, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from ..auth.schema import Principal
from ..categories import service as category_service
from ..exceptions import Forbidden, InvalidInput, NotFound
from ..tags import service as tag_service
from ..users.models import Role
from .models import SLUG_MAX_LENGTH, Article, ArticleStatus
from .schemas import ArticleCreate, ArticleUpdate
from .slugs import slugify

logger = logging.getLogger(__name__)

# 기사 응답에 필요한 연관 객체를 한 번에 로드 (async 세션에서는 lazy load 불가)
ARTICLE_LOAD_OPTIONS = (
    selectinload(Article.author),
    selectinload(Article.category),
    selectinload(Article.tags),
)


def derive_slug(title: str) -> str:
    slug = slugify(title)[:SLUG_MAX_LENGTH].rstrip("-")
    if not slug:
        raise InvalidInput(
            "Title must contain letters or digits",
            errors=[{"field": "title", "message": "cannot be converted to a slug"}],
        )
    return slug


def derive_published_at(status: ArticleStatus, published_at: Optional[datetime]) -> Optional[datetime]:
    """게시 예정(SCHEDULED)이고 날짜가 주어진 경우에만 publishedAt 을 보존합니다."""
    if status == ArticleStatus.SCHEDULED and published_at is not None:
        return published_at
    return None


def ensure_can_modify(article: Article, principal: Principal) -> None:
    """
    리소스 단위 권한 검사. EDITOR 는 모든 기사, JOURNALIST 는 본인 기사만 수정/삭제할 수 있습니다.
    반드시 기사 조회(404) 이후에 호출합니다.
    """
    if principal.role == Role.EDITOR:
        return
    if principal.role == Role.JOURNALIST and article.author_id == principal.id:
        return
    logger.warning(
        "Ownership check denied: principal_id=%s role=%s article_id=%s author_id=%s",
        principal.id,
        principal.role.value,
        article.id,
        article.author_id,
    )
    raise Forbidden("You can only modify your own articles")


async def _find_article(db: AsyncSession, *conditions) -> Optional[Article]:
    result = await db.execute(
        select(Article)
        .options(*ARTICLE_LOAD_OPTIONS)
        .where(*conditions)
        .execution_options(populate_existing=True)
    )
    return result.scalar_one_or_none()


async def get_article(db: AsyncSession, article_id: int) -> Article:
    article = await _find_article(db, Article.id == article_id)
    if article is None:
        raise NotFound("Article not found")
    return article


async def get_article_by_slug(db: AsyncSession, slug: str) -> Article:
    article = await _find_article(db, Article.slug == slug)
    if article is None:
        raise NotFound("Article not found")
    return article


async def register_view(db: AsyncSession, article: Article) -> Article:
    """
    공개(PUBLISHED) 기사 조회 시 조회수를 1 증가시킵니다.
    DB 측 원자적 증가(UPDATE ... SET views_count = views_count + 1)로 동시 조회에도 누락이 없습니다.
    """
    if article.status != ArticleStatus.PUBLISHED:
        return article
    await db.execute(
        update(Article)
        .where(Article.id == article.id)
        # 조회는 수정이 아니므로 updated_at 은 그대로 둡니다 (onupdate 억제)
        .values(views_count=Article.views_count + 1, updated_at=Article.updated_at)
        .execution_options(synchronize_session=False)
    )
    await db.commit()
    await db.refresh(article, attribute_names=["views_count"])
    return article


async def _resolve_category(db: AsyncSession, category_id: int) -> None:
    if await category_service.get_by_id(db, category_id) is None:
        raise InvalidInput(
            "Category not found",
            errors=[{"field": "categoryId", "message": f"category {category_id} does not exist"}],
        )


def integrity_error_detail(exc: IntegrityError) -> str:
    """
    위반된 제약을 응답 메시지로 변환합니다.
    SQLite 는 "UNIQUE constraint failed: articles.slug", PostgreSQL 은 인덱스 이름(ix_articles_slug)을 메시지에 담습니다.
    """
    if "slug" in str(exc.orig).lower():
        return "Title already in use"
    return "Request conflicts with existing data"


async def _commit_article(db: AsyncSession, article_id_hint: Optional[int] = None) -> None:
    # slug 유일성은 DB 유니크 제약으로 판정 (사전 조회 후 쓰기 방식의 경합 회피)
    try:
        await db.commit()
    except IntegrityError as e:
        await db.rollback()
        logger.info("Article write rejected by constraint (article_id=%s): %s", article_id_hint, e.orig)
        raise InvalidInput(integrity_error_detail(e))


async def create_article(db: AsyncSession, data: ArticleCreate, principal: Principal) -> Article:
    await _resolve_category(db, data.category_id)
    tags = await tag_service.get_or_create_by_names(db, data.tags or [])

    status = data.status or ArticleStatus.DRAFT
    article = Article(
        title=data.title,
        slug=derive_slug(data.title),
        subtitle=data.subtitle,
        content=data.content,
        cover_image=str(data.cover_image) if data.cover_image else None,
        status=status,
        published_at=derive_published_at(status, data.published_at),
        author_id=principal.id,
        category_id=data.category_id,
        tags=tags,
    )
    # 태그 upsert 와 기사 INSERT 는 같은 트랜잭션에서 커밋됩니다.
    db.add(article)
    await _commit_article(db)

    logger.info(
        "Article created: id=%s slug=%s status=%s author_id=%s",
        article.id, article.slug, article.status.value, article.author_id,
    )
    return await get_article(db, article.id)


async def update_article(
    db: AsyncSession, article_id: int, data: ArticleUpdate, principal: Principal
) -> Article:
    # 순서 고정: 조회(404) -> 소유권(403) -> 변경
    article = await get_article(db, article_id)
    ensure_can_modify(article, principal)

    fields = data.model_dump(exclude_unset=True)
    previous_status = article.status

    # DB 조회/upsert 를 먼저 끝내고 속성 변경은 마지막에 (autoflush 로 인한 조기 INSERT/UPDATE 방지)
    if fields.get("category_id") is not None:
        await _resolve_category(db, data.category_id)
    new_tags = None
    if "tags" in fields:
        new_tags = await tag_service.get_or_create_by_names(db, data.tags or [])

    if fields.get("title") is not None:
        slug = derive_slug(data.title)
        article.title = data.title
        article.slug = slug
    if fields.get("category_id") is not None:
        article.category_id = data.category_id
    if "subtitle" in fields:
        article.subtitle = data.subtitle
    if fields.get("content") is not None:
        article.content = data.content
    if "cover_image" in fields:
        article.cover_image = str(data.cover_image) if data.cover_image else None

    if "status" in fields or "published_at" in fields:
        status = data.status or article.status
        requested_date = data.published_at if "published_at" in fields else article.published_at
        article.status = status
        article.published_at = derive_published_at(status, requested_date)

    # 태그는 전체 교체: 목록이 주어지면 기존 연결을 비우고 다시 구성
    if new_tags is not None:
        article.tags = new_tags

    # 태그만 바뀌면 articles 행 UPDATE 가 없어 onupdate 가 동작하지 않으므로 직접 갱신
    if fields:
        article.updated_at = func.now()

    await _commit_article(db, article.id)

    if article.status != previous_status:
        logger.info(
            "Article status changed: id=%s %s -> %s by principal_id=%s",
            article.id, previous_status.value, article.status.value, principal.id,
        )
    logger.info("Article updated: id=%s fields=%s", article.id, sorted(fields))
    return await get_article(db, article.id)


async def delete_article(db: AsyncSession, article_id: int, principal: Principal) -> None:
    """영구 삭제. 태그 연결 행은 함께 삭제되지만 카테고리/태그 자체는 유지됩니다."""
    article = await get_article(db, article_id)
    ensure_can_modify(article, principal)

    await db.delete(article)
    await db.commit()
    logger.info("Article deleted: id=%s by principal_id=%s", article_id, principal.id)
