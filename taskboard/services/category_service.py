import logging

from sqlalchemy import update
from sqlmodel import col, select
from sqlmodel.ext.asyncio.session import AsyncSession

from taskboard.errors import ValidationFailed
from taskboard.models import Category, Task, get_utc_now
from taskboard.schemas import CategoryCreate, CategoryUpdate
from taskboard.validation import validate_category_data

logger = logging.getLogger(__name__)

DEFAULT_CATEGORIES = (
    {"name": "Work", "color": "#3b82f6"},
    {"name": "Personal", "color": "#10b981"},
    {"name": "Shopping", "color": "#f59e0b"},
    {"name": "Health", "color": "#ef4444"},
)


def _validated(data: dict) -> dict:
    result = validate_category_data(data)
    if not result.ok:
        raise ValidationFailed(result.error)
    return result.data


async def _name_taken(db: AsyncSession, name: str, exclude_id: int | None = None) -> bool:
    query = select(Category.id).where(Category.name == name)
    if exclude_id is not None:
        query = query.where(Category.id != exclude_id)
    result = await db.exec(query)
    return result.first() is not None


class CategoryService:
    @staticmethod
    async def get_all_categories(db: AsyncSession):
        result = await db.exec(select(Category).order_by(col(Category.name).asc()))
        return list(result.all())

    @staticmethod
    async def get_category(db: AsyncSession, category_id: int):
        return await db.get(Category, category_id)

    @staticmethod
    async def create_category(db: AsyncSession, category_data: CategoryCreate):
        payload = category_data.model_dump(exclude_unset=True)
        payload.setdefault("name", None)
        data = _validated(payload)
        if await _name_taken(db, data["name"]):
            raise ValidationFailed("Category name already exists")

        category = Category(**data)
        db.add(category)
        await db.commit()
        await db.refresh(category)
        logger.info("Created category %s (%s)", category.id, category.name)
        return category

    @staticmethod
    async def update_category(
        db: AsyncSession, category_id: int, category_data: CategoryUpdate
    ):
        category = await db.get(Category, category_id)
        if not category:
            return None

        update_data = _validated(category_data.model_dump(exclude_unset=True))
        if "name" in update_data and await _name_taken(
            db, update_data["name"], exclude_id=category_id
        ):
            raise ValidationFailed("Category name already exists")

        category.sqlmodel_update(update_data)
        category.updated_at = get_utc_now()
        await db.commit()
        await db.refresh(category)
        logger.info("Updated category %s", category_id)
        return category

    @staticmethod
    async def delete_category(db: AsyncSession, category_id: int):
        category = await db.get(Category, category_id)
        if not category:
            return False

        # detach tasks in the same transaction as the delete
        result = await db.exec(
            update(Task)
            .where(col(Task.category_id) == category_id)
            .values(category_id=None)
        )
        await db.delete(category)
        await db.commit()
        logger.info(
            "Deleted category %s, cleared it from %s task(s)", category_id, result.rowcount
        )
        return True

    @staticmethod
    async def seed_default_categories(db: AsyncSession) -> int:
        """Insert the default categories that are missing by name."""
        created = 0
        for defaults in DEFAULT_CATEGORIES:
            if await _name_taken(db, defaults["name"]):
                continue
            db.add(Category(**defaults))
            created += 1
        if created:
            await db.commit()
        logger.info("Seeded %s default categories", created)
        return created
