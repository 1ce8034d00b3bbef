from datetime import datetime
from typing import List, Literal, Optional

from pydantic import AnyHttpUrl, Field, field_validator

from ..categories.schemas import CategoryOut
from ..database import MAX_ROW_ID
from ..models import CustomModel
from ..tags.schemas import TagName, TagOut
from ..users.models import Role
from .models import ArticleStatus


class ArticleCreate(CustomModel):
    title: str = Field(..., min_length=1, max_length=255, json_schema_extra={"example": "My First Post"})
    subtitle: Optional[str] = Field(None, max_length=500)
    content: str = Field(..., min_length=1)
    cover_image: Optional[AnyHttpUrl] = Field(None, json_schema_extra={"example": "https://cdn.example.com/cover.jpg"})
    category_id: int = Field(..., ge=1, le=MAX_ROW_ID)
    tags: Optional[List[TagName]] = Field(None, json_schema_extra={"example": ["football", "world-cup"]})
    status: Optional[ArticleStatus] = None
    published_at: Optional[datetime] = None

    @field_validator("title", "content")
    @classmethod
    def not_blank(cls, v):
        if isinstance(v, str) and not v.strip():
            raise ValueError("must not be blank")
        return v


class ArticleUpdate(CustomModel):
    """부분 수정. 요청에 포함된 필드만 반영합니다."""
    title: Optional[str] = Field(None, min_length=1, max_length=255)
    subtitle: Optional[str] = Field(None, max_length=500)
    content: Optional[str] = Field(None, min_length=1)
    cover_image: Optional[AnyHttpUrl] = None
    category_id: Optional[int] = Field(None, ge=1, le=MAX_ROW_ID)
    tags: Optional[List[TagName]] = None
    status: Optional[ArticleStatus] = None
    published_at: Optional[datetime] = None

    @field_validator("title", "content")
    @classmethod
    def not_blank(cls, v):
        if isinstance(v, str) and not v.strip():
            raise ValueError("must not be blank")
        return v


class ArticleAuthor(CustomModel):
    id: int
    username: str
    email: str
    role: Role


class ArticleOut(CustomModel):
    id: int
    title: str
    slug: str
    subtitle: Optional[str] = None
    content: str
    cover_image: Optional[str] = None
    status: ArticleStatus
    published_at: Optional[datetime] = None
    views_count: int
    author_id: int
    category_id: int
    author: ArticleAuthor
    category: CategoryOut
    tags: List[TagOut]
    created_at: datetime
    updated_at: datetime


SortField = Literal["createdAt", "updatedAt", "publishedAt", "title", "viewsCount"]
SortOrder = Literal["asc", "desc"]


class ArticleListResponse(CustomModel):
    articles: List[ArticleOut]
    total_articles: int
    page: int
    limit: int
