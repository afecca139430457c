from fastapi import APIRouter, Depends, status
from sqlmodel.ext.asyncio.session import AsyncSession

from taskboard.database import get_db
from taskboard.errors import NotFound
from taskboard.routers.common import ValidId, require_fields
from taskboard.schemas import CategoryCreate, CategoryRead, CategoryUpdate, Envelope
from taskboard.services.category_service import CategoryService

router = APIRouter(prefix="/categories", tags=["categories"])


@router.get("", response_model=Envelope[list[CategoryRead]], response_model_exclude_unset=True)
async def get_categories(db: AsyncSession = Depends(get_db)):
    categories = await CategoryService.get_all_categories(db)
    return Envelope(
        success=True, data=[CategoryRead.model_validate(c) for c in categories]
    )


@router.get("/{id}", response_model=Envelope[CategoryRead], response_model_exclude_unset=True)
async def get_category(category_id: ValidId, db: AsyncSession = Depends(get_db)):
    category = await CategoryService.get_category(db, category_id)
    if not category:
        raise NotFound("Category not found")
    return Envelope(success=True, data=CategoryRead.model_validate(category))


@router.post(
    "",
    response_model=Envelope[CategoryRead],
    response_model_exclude_unset=True,
    status_code=status.HTTP_201_CREATED,
)
async def create_category(
    category_data: CategoryCreate | None = None, db: AsyncSession = Depends(get_db)
):
    category_data = category_data or CategoryCreate()
    require_fields(category_data, ["name"])
    category = await CategoryService.create_category(db, category_data)
    return Envelope(
        success=True,
        data=CategoryRead.model_validate(category),
        message="Category created successfully",
    )


@router.put("/{id}", response_model=Envelope[CategoryRead], response_model_exclude_unset=True)
async def update_category(
    category_id: ValidId,
    category_data: CategoryUpdate | None = None,
    db: AsyncSession = Depends(get_db),
):
    category = await CategoryService.update_category(
        db, category_id, category_data or CategoryUpdate()
    )
    if not category:
        raise NotFound("Category not found")
    return Envelope(
        success=True,
        data=CategoryRead.model_validate(category),
        message="Category updated successfully",
    )


@router.delete("/{id}", response_model=Envelope[None], response_model_exclude_unset=True)
async def delete_category(category_id: ValidId, db: AsyncSession = Depends(get_db)):
    """Delete a category; its tasks keep existing without a category"""
    deleted = await CategoryService.delete_category(db, category_id)
    if not deleted:
        raise NotFound("Category not found")
    return Envelope(success=True, message="Category deleted successfully")
