import logging
from typing import List, Optional

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from ..articles.models import Article
from ..exceptions import InvalidInput, NotFound
from .models import Category
from .schemas import CategoryIn

logger = logging.getLogger(__name__)


async def list_categories(db: AsyncSession) -> List[Category]:
    result = await db.execute(select(Category).order_by(Category.name))
    return result.scalars().all()


async def get_by_id(db: AsyncSession, category_id: int) -> Optional[Category]:
    result = await db.execute(select(Category).where(Category.id == category_id))
    return result.scalar_one_or_none()


async def get_or_404(db: AsyncSession, category_id: int) -> Category:
    category = await get_by_id(db, category_id)
    if category is None:
        raise NotFound("Category not found")
    return category


async def _commit_name_change(db: AsyncSession, category: Category) -> Category:
    try:
        await db.commit()
    except IntegrityError:
        await db.rollback()
        raise InvalidInput("Category name already in use")
    await db.refresh(category)
    return category


async def create_category(db: AsyncSession, data: CategoryIn) -> Category:
    category = Category(name=data.name)
    db.add(category)
    category = await _commit_name_change(db, category)
    logger.info("Category created: id=%s name=%r", category.id, category.name)
    return category


async def update_category(db: AsyncSession, category_id: int, data: CategoryIn) -> Category:
    category = await get_or_404(db, category_id)
    category.name = data.name
    return await _commit_name_change(db, category)


async def delete_category(db: AsyncSession, category_id: int) -> None:
    category = await get_or_404(db, category_id)
    in_use = (
        await db.execute(select(func.count(Article.id)).where(Article.category_id == category.id))
    ).scalar_one()
    if in_use:
        raise InvalidInput("Category is in use")
    await db.delete(category)
    try:
        await db.commit()
    except IntegrityError:
        # 검사 이후 다른 요청이 기사를 연결한 경우
        await db.rollback()
        raise InvalidInput("Category is in use")
    logger.info("Category deleted: id=%s", category_id)
