from typing import List

from fastapi import APIRouter, status

from ..auth.dependencies import EditorOnly
from ..database import RowId, SessionDep
from . import service
from .schemas import CategoryIn, CategoryOut

router = APIRouter(prefix="/api/categories", tags=["categories"])


@router.post("", response_model=CategoryOut, status_code=status.HTTP_201_CREATED, dependencies=[EditorOnly])
async def create_category(body: CategoryIn, db: SessionDep):
    return await service.create_category(db, body)


@router.get("", response_model=List[CategoryOut])
async def list_categories(db: SessionDep):
    return await service.list_categories(db)


@router.get("/{category_id}", response_model=CategoryOut)
async def get_category(category_id: RowId, db: SessionDep):
    return await service.get_or_404(db, category_id)


@router.put("/{category_id}", response_model=CategoryOut, dependencies=[EditorOnly])
async def update_category(category_id: RowId, body: CategoryIn, db: SessionDep):
    return await service.update_category(db, category_id, body)


@router.delete("/{category_id}", status_code=status.HTTP_204_NO_CONTENT, dependencies=[EditorOnly])
async def delete_category(category_id: RowId, db: SessionDep):
    await service.delete_category(db, category_id)
    return
