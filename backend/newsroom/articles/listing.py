from dataclasses import dataclass, field
from typing import List, Optional, Sequence

from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from ..categories.models import Category
from ..tags.models import Tag
from .models import Article
from .service import ARTICLE_LOAD_OPTIONS

SORT_COLUMNS = {
    "createdAt": Article.created_at,
    "updatedAt": Article.updated_at,
    "publishedAt": Article.published_at,
    "title": Article.title,
    "viewsCount": Article.views_count,
}


@dataclass
class ArticleFilter:
    category: Optional[str] = None
    tags: List[str] = field(default_factory=list)
    search: Optional[str] = None
    page: int = 1
    limit: int = 10
    sort_by: str = "createdAt"
    sort_order: str = "desc"

    @property
    def skip(self) -> int:
        return (self.page - 1) * self.limit


@dataclass
class ArticlePage:
    articles: Sequence[Article]
    total_articles: int
    page: int
    limit: int


def split_tag_params(values: Optional[Sequence[str]]) -> List[str]:
    """`?tags=a&tags=b` 와 `?tags=a,b` 두 형태를 모두 허용합니다."""
    names: List[str] = []
    for value in values or []:
        names.extend(part.strip() for part in value.split(",") if part.strip())
    return names


def build_conditions(flt: ArticleFilter) -> list:
    """
    필터 차원끼리는 AND, 각 차원 내부는 OR 로 결합합니다.
    - category: 카테고리 이름 정확히 일치
    - tags: 지정한 이름 중 하나라도 가진 기사
    - search: 제목/부제/본문 중 하나라도 대소문자 무시 부분 일치
    """
    conditions = []
    if flt.category:
        conditions.append(Article.category.has(Category.name == flt.category))
    if flt.tags:
        conditions.append(Article.tags.any(Tag.name.in_(flt.tags)))
    if flt.search:
        conditions.append(
            or_(
                Article.title.icontains(flt.search, autoescape=True),
                Article.subtitle.icontains(flt.search, autoescape=True),
                Article.content.icontains(flt.search, autoescape=True),
            )
        )
    return conditions


async def list_articles(db: AsyncSession, flt: ArticleFilter) -> ArticlePage:
    conditions = build_conditions(flt)

    column = SORT_COLUMNS.get(flt.sort_by, Article.created_at)
    if flt.sort_order == "asc":
        order_by = (column.asc(), Article.id.asc())
    else:
        order_by = (column.desc(), Article.id.desc())

    stmt = (
        select(Article)
        .options(*ARTICLE_LOAD_OPTIONS)
        .where(*conditions)
        .order_by(*order_by)
        .offset(flt.skip)
        .limit(flt.limit)
        .execution_options(populate_existing=True)
    )
    articles = (await db.execute(stmt)).scalars().all()

    # 페이지와 무관한 전체 건수 (클라이언트 페이지 수 계산용)
    total = (await db.execute(select(func.count(Article.id)).where(*conditions))).scalar_one()

    return ArticlePage(articles=articles, total_articles=total, page=flt.page, limit=flt.limit)
