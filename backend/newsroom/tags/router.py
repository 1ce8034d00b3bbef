from typing import List

from fastapi import APIRouter, status

from ..auth.dependencies import EditorOnly
from ..database import RowId, SessionDep
from . import service
from .schemas import TagIn, TagOut

router = APIRouter(prefix="/api/tags", tags=["tags"])


@router.post("", response_model=TagOut, status_code=status.HTTP_201_CREATED, dependencies=[EditorOnly])
async def create_tag(body: TagIn, db: SessionDep):
    return await service.create_tag(db, body)


@router.get("", response_model=List[TagOut])
async def list_tags(db: SessionDep):
    return await service.list_tags(db)


@router.get("/{tag_id}", response_model=TagOut)
async def get_tag(tag_id: RowId, db: SessionDep):
    return await service.get_or_404(db, tag_id)


@router.put("/{tag_id}", response_model=TagOut, dependencies=[EditorOnly])
async def update_tag(tag_id: RowId, body: TagIn, db: SessionDep):
    return await service.update_tag(db, tag_id, body)


@router.delete("/{tag_id}", status_code=status.HTTP_204_NO_CONTENT, dependencies=[EditorOnly])
async def delete_tag(tag_id: RowId, db: SessionDep):
    await service.delete_tag(db, tag_id)
    return
