# backend/newsroom/articles/router.py
from typing import List, Optional

from fastapi import APIRouter, Query, status

from ..auth.dependencies import ArticleWriter
from ..auth.schema import Principal
from ..database import RowId, SessionDep
from . import service
from .listing import ArticleFilter, list_articles, split_tag_params
from .schemas import (
    ArticleCreate,
    ArticleListResponse,
    ArticleOut,
    ArticleUpdate,
    SortField,
    SortOrder,
)

router = APIRouter(prefix="/api/articles", tags=["articles"])


@router.post("", response_model=ArticleOut, status_code=status.HTTP_201_CREATED)
async def create_article(body: ArticleCreate, db: SessionDep, principal: Principal = ArticleWriter):
    return await service.create_article(db, body, principal)


@router.get("", response_model=ArticleListResponse)
async def list_articles_route(
    db: SessionDep,
    category: Optional[str] = None,
    tags: Optional[List[str]] = Query(None),
    search: Optional[str] = None,
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    sort_by: SortField = Query("createdAt", alias="sortBy"),
    sort_order: SortOrder = Query("desc", alias="sortOrder"),
):
    flt = ArticleFilter(
        category=category or None,
        tags=split_tag_params(tags),
        search=search or None,
        page=page,
        limit=limit,
        sort_by=sort_by,
        sort_order=sort_order,
    )
    result = await list_articles(db, flt)
    return ArticleListResponse(
        articles=[ArticleOut.model_validate(a) for a in result.articles],
        total_articles=result.total_articles,
        page=result.page,
        limit=result.limit,
    )


@router.get("/slug/{slug}", response_model=ArticleOut)
async def get_article_by_slug(slug: str, db: SessionDep):
    article = await service.get_article_by_slug(db, slug)
    return await service.register_view(db, article)


@router.get("/{article_id}", response_model=ArticleOut)
async def get_article(article_id: RowId, db: SessionDep):
    # 인증 불필요. 조회수는 PUBLISHED 기사에서만 증가
    article = await service.get_article(db, article_id)
    return await service.register_view(db, article)


@router.put("/{article_id}", response_model=ArticleOut)
async def update_article(
    article_id: RowId,
    body: ArticleUpdate,
    db: SessionDep,
    principal: Principal = ArticleWriter,
):
    return await service.update_article(db, article_id, body, principal)


@router.delete("/{article_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_article(article_id: RowId, db: SessionDep, principal: Principal = ArticleWriter):
    await service.delete_article(db, article_id, principal)
    return
