from fastapi import APIRouter, Depends, Query, status
from sqlmodel.ext.asyncio.session import AsyncSession

from taskboard.database import get_db
from taskboard.errors import NotFound
from taskboard.routers.common import ValidId, require_fields
from taskboard.schemas import (
    Envelope,
    TaskCreate,
    TaskFilters,
    TaskRead,
    TaskStatistics,
    TaskUpdate,
)
from taskboard.services.task_service import TaskService

router = APIRouter(prefix="/tasks", tags=["tasks"])


# Must stay above /{id} so "stats" is never parsed as an id
@router.get("/stats", response_model=Envelope[TaskStatistics], response_model_exclude_unset=True)
async def get_task_stats(db: AsyncSession = Depends(get_db)):
    """Task counts by status, high priority and overdue"""
    stats = await TaskService.get_statistics(db)
    return Envelope(success=True, data=stats)


@router.get("", response_model=Envelope[list[TaskRead]], response_model_exclude_unset=True)
async def get_tasks(
    status_: str | None = Query(default=None, alias="status"),
    priority: str | None = None,
    category_id: int | None = Query(default=None, alias="categoryId"),
    search: str | None = None,
    db: AsyncSession = Depends(get_db),
):
    filters = TaskFilters(
        status=status_, priority=priority, category_id=category_id, search=search
    )
    tasks = await TaskService.get_all_tasks(db, filters)
    return Envelope(success=True, data=[TaskRead.model_validate(t) for t in tasks])


@router.get("/{id}", response_model=Envelope[TaskRead], response_model_exclude_unset=True)
async def get_task(task_id: ValidId, db: AsyncSession = Depends(get_db)):
    """Get a specific task by ID"""
    task = await TaskService.get_task(db, task_id)
    if not task:
        raise NotFound("Task not found")
    return Envelope(success=True, data=TaskRead.model_validate(task))


@router.post(
    "",
    response_model=Envelope[TaskRead],
    response_model_exclude_unset=True,
    status_code=status.HTTP_201_CREATED,
)
async def create_task(task_data: TaskCreate | None = None, db: AsyncSession = Depends(get_db)):
    """Create a new task"""
    task_data = task_data or TaskCreate()
    require_fields(task_data, ["title"])
    task = await TaskService.create_task(db, task_data)
    return Envelope(
        success=True,
        data=TaskRead.model_validate(task),
        message="Task created successfully",
    )


@router.put("/{id}", response_model=Envelope[TaskRead], response_model_exclude_unset=True)
async def update_task(
    task_id: ValidId,
    task_data: TaskUpdate | None = None,
    db: AsyncSession = Depends(get_db),
):
    task = await TaskService.update_task(db, task_id, task_data or TaskUpdate())
    if not task:
        raise NotFound("Task not found")
    return Envelope(
        success=True,
        data=TaskRead.model_validate(task),
        message="Task updated successfully",
    )


@router.delete("/{id}", response_model=Envelope[None], response_model_exclude_unset=True)
async def delete_task(task_id: ValidId, db: AsyncSession = Depends(get_db)):
    """Delete a task"""
    deleted = await TaskService.delete_task(db, task_id)
    if not deleted:
        raise NotFound("Task not found")
    return Envelope(success=True, message="Task deleted successfully")
