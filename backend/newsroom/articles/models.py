# backend/newsroom/articles/models.py
from enum import Enum as PyEnum
from sqlalchemy import (
    Column, Integer, String, Text, DateTime, ForeignKey, Table,
    Enum as SQLEnum, Index
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from ..database import Base

class ArticleStatus(str, PyEnum):
    DRAFT = "DRAFT"
    SCHEDULED = "SCHEDULED"
    PUBLISHED = "PUBLISHED"

# 기사-태그 N:M 연결 테이블. 기사/태그 삭제 시 연결 행만 함께 삭제됩니다.
article_tags = Table(
    "article_tags",
    Base.metadata,
    Column("article_id", Integer, ForeignKey("articles.id", ondelete="CASCADE"), primary_key=True),
    Column("tag_id", Integer, ForeignKey("tags.id", ondelete="CASCADE"), primary_key=True),
)

# slug 컬럼 길이. NFKD 변환으로 제목보다 길어질 수 있어 파생 시 이 길이로 자른다
SLUG_MAX_LENGTH = 255

class Article(Base):
    __tablename__ = "articles"
    __table_args__ = (
        Index("ix_articles_status_created", "status", "created_at"),
    )

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String(255), nullable=False)
    slug = Column(String(SLUG_MAX_LENGTH), unique=True, nullable=False, index=True)  # 제목에서 파생, 전역 유일
    subtitle = Column(String(500), nullable=True)
    content = Column(Text, nullable=False)
    cover_image = Column(String(1000), nullable=True)
    status = Column(SQLEnum(ArticleStatus, name="article_status"), default=ArticleStatus.DRAFT, nullable=False, index=True)
    published_at = Column(DateTime(timezone=True), nullable=True)  # SCHEDULED 일 때만 값 보유
    views_count = Column(Integer, nullable=False, default=0, server_default="0")
    author_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    category_id = Column(Integer, ForeignKey("categories.id"), nullable=False, index=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    author = relationship("User", back_populates="articles")
    category = relationship("Category")
    tags = relationship("Tag", secondary=article_tags, order_by="Tag.name")

    def __repr__(self) -> str:
        return f"Article(id={self.id}, slug={self.slug!r}, status={self.status!r}, author_id={self.author_id})"
    def __str__(self) -> str:
        return self.title
