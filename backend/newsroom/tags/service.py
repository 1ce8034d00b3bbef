import logging
from typing import Iterable, List, Optional

from sqlalchemy import delete, select
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from ..articles.models import article_tags
from ..exceptions import InvalidInput, NotFound
from .models import Tag
from .schemas import TagIn

logger = logging.getLogger(__name__)


def normalize_tag_names(names: Iterable[str]) -> List[str]:
    """공백 제거 + 빈 이름 제외 + 순서를 유지한 중복 제거."""
    seen = {}
    for name in names:
        cleaned = name.strip() if isinstance(name, str) else ""
        if cleaned and cleaned not in seen:
            seen[cleaned] = None
    return list(seen)


def _insert_for(db: AsyncSession):
    dialect = db.get_bind().dialect.name
    if dialect == "postgresql":
        return postgresql.insert
    if dialect == "sqlite":
        return sqlite.insert
    raise RuntimeError(f"Unsupported dialect for tag upsert: {dialect}")


async def get_or_create_by_names(db: AsyncSession, names: Iterable[str]) -> List[Tag]:
    """
    이름 기준 upsert. INSERT ... ON CONFLICT DO NOTHING 으로 원자적으로 생성한 뒤 조회하므로
    동시 요청이 같은 이름을 만들어도 중복 행이나 유니크 위반이 생기지 않습니다.
    커밋은 호출자가 수행합니다.
    """
    wanted = normalize_tag_names(names)
    if not wanted:
        return []

    insert = _insert_for(db)
    await db.execute(
        insert(Tag)
        .values([{"name": name} for name in wanted])
        .on_conflict_do_nothing(index_elements=["name"])
    )
    result = await db.execute(select(Tag).where(Tag.name.in_(wanted)))
    by_name = {tag.name: tag for tag in result.scalars().all()}
    return [by_name[name] for name in wanted]


async def list_tags(db: AsyncSession) -> List[Tag]:
    result = await db.execute(select(Tag).order_by(Tag.name))
    return result.scalars().all()


async def get_by_id(db: AsyncSession, tag_id: int) -> Optional[Tag]:
    result = await db.execute(select(Tag).where(Tag.id == tag_id))
    return result.scalar_one_or_none()


async def get_or_404(db: AsyncSession, tag_id: int) -> Tag:
    tag = await get_by_id(db, tag_id)
    if tag is None:
        raise NotFound("Tag not found")
    return tag


async def _commit_name_change(db: AsyncSession, tag: Tag) -> Tag:
    try:
        await db.commit()
    except IntegrityError:
        await db.rollback()
        raise InvalidInput("Tag name already in use")
    await db.refresh(tag)
    return tag


async def create_tag(db: AsyncSession, data: TagIn) -> Tag:
    tag = Tag(name=data.name)
    db.add(tag)
    tag = await _commit_name_change(db, tag)
    logger.info("Tag created: id=%s name=%r", tag.id, tag.name)
    return tag


async def update_tag(db: AsyncSession, tag_id: int, data: TagIn) -> Tag:
    tag = await get_or_404(db, tag_id)
    tag.name = data.name
    return await _commit_name_change(db, tag)


async def delete_tag(db: AsyncSession, tag_id: int) -> None:
    """태그 삭제. 기사와의 연결만 제거되고 기사 자체는 유지됩니다."""
    tag = await get_or_404(db, tag_id)
    await db.execute(delete(article_tags).where(article_tags.c.tag_id == tag.id))
    await db.delete(tag)
    await db.commit()
    logger.info("Tag deleted: id=%s", tag_id)
