import logging
from datetime import datetime, timezone

from sqlalchemy import or_
from sqlalchemy.orm import selectinload
from sqlmodel import col, select
from sqlmodel.ext.asyncio.session import AsyncSession

from taskboard.errors import ValidationFailed
from taskboard.models import Task, TaskPriority, TaskStatus, get_utc_now
from taskboard.schemas import TaskCreate, TaskFilters, TaskStatistics, TaskUpdate
from taskboard.validation import validate_task_data

logger = logging.getLogger(__name__)


def _with_category(query):
    # populate_existing so a re-fetch after commit sees the new category
    return query.options(selectinload(Task.category)).execution_options(
        populate_existing=True
    )


def build_task_filters(query, filters: TaskFilters):
    """AND together every filter that was actually provided."""
    if filters.status:
        query = query.where(Task.status == filters.status)
    if filters.priority:
        query = query.where(Task.priority == filters.priority)
    if filters.category_id:
        query = query.where(Task.category_id == filters.category_id)
    if filters.search:
        pattern = f"%{filters.search}%"
        query = query.where(
            or_(col(Task.title).ilike(pattern), col(Task.description).ilike(pattern))
        )
    return query


def is_overdue(task: Task, now: datetime | None = None) -> bool:
    if task.due_date is None or task.status == TaskStatus.COMPLETED.value:
        return False
    now = now or datetime.now(timezone.utc)
    due = task.due_date
    if due.tzinfo is None:
        due = due.replace(tzinfo=timezone.utc)
    return due < now


def summarize(tasks: list[Task], now: datetime | None = None) -> TaskStatistics:
    now = now or datetime.now(timezone.utc)
    return TaskStatistics(
        total=len(tasks),
        pending=sum(1 for t in tasks if t.status == TaskStatus.PENDING.value),
        in_progress=sum(1 for t in tasks if t.status == TaskStatus.IN_PROGRESS.value),
        completed=sum(1 for t in tasks if t.status == TaskStatus.COMPLETED.value),
        high_priority=sum(1 for t in tasks if t.priority == TaskPriority.HIGH.value),
        overdue=sum(1 for t in tasks if is_overdue(t, now)),
    )


def _validated(data: dict) -> dict:
    result = validate_task_data(data)
    if not result.ok:
        raise ValidationFailed(result.error)
    return result.data


class TaskService:
    @staticmethod
    async def get_all_tasks(db: AsyncSession, filters: TaskFilters | None = None):
        query = build_task_filters(select(Task), filters or TaskFilters())
        query = _with_category(query).order_by(
            col(Task.created_at).desc(), col(Task.id).desc()
        )

        result = await db.exec(query)
        return list(result.all())

    @staticmethod
    async def get_task(db: AsyncSession, task_id: int):
        result = await db.exec(_with_category(select(Task).where(Task.id == task_id)))
        return result.first()

    @staticmethod
    async def create_task(db: AsyncSession, task_data: TaskCreate):
        payload = task_data.model_dump(exclude_unset=True)
        payload.setdefault("title", None)
        task = Task(**_validated(payload))
        db.add(task)
        await db.commit()
        logger.info("Created task %s", task.id)
        return await TaskService.get_task(db, task.id)

    @staticmethod
    async def update_task(db: AsyncSession, task_id: int, task_data: TaskUpdate):
        task = await db.get(Task, task_id)
        if not task:
            return None

        update_data = _validated(task_data.model_dump(exclude_unset=True))
        task.sqlmodel_update(update_data)
        task.updated_at = get_utc_now()
        await db.commit()
        logger.info("Updated task %s (%s)", task_id, ", ".join(sorted(update_data)) or "no fields")
        return await TaskService.get_task(db, task_id)

    @staticmethod
    async def delete_task(db: AsyncSession, task_id: int):
        task = await db.get(Task, task_id)
        if not task:
            return False
        await db.delete(task)
        await db.commit()
        logger.info("Deleted task %s", task_id)
        return True

    @staticmethod
    async def get_statistics(db: AsyncSession):
        result = await db.exec(select(Task))
        return summarize(list(result.all()))
