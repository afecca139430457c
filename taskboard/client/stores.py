"""
Client-side state containers for tasks and categories.

A store owns the current list plus ``loading``/``error`` flags. Mutations
never merge locally: after a successful write the whole list is fetched
again. A failed mutation records ``error`` and re-raises so the caller (a
form, a button) can react; a failed fetch only records ``error``.
"""

import logging
from abc import ABC, abstractmethod
from typing import Callable

from taskboard.client.api import ApiClientError, TaskboardApi
from taskboard.schemas import (
    CategoryCreate,
    CategoryRead,
    CategoryUpdate,
    TaskCreate,
    TaskFilters,
    TaskRead,
    TaskUpdate,
)

logger = logging.getLogger(__name__)


def _message(exc: Exception, fallback: str) -> str:
    if isinstance(exc, ApiClientError):
        return exc.message
    return str(exc) or fallback


class _Store(ABC):
    def __init__(self, api: TaskboardApi):
        self.api = api
        self.loading = False
        self.error: str | None = None
        self._mounted = False
        self._listeners: list[Callable[[], None]] = []

    def subscribe(self, listener: Callable[[], None]) -> Callable[[], None]:
        """Register a change callback; returns an unsubscribe function."""
        self._listeners.append(listener)
        return lambda: self._listeners.remove(listener)

    def _notify(self):
        for listener in list(self._listeners):
            listener()

    async def mount(self):
        """Initial fetch; later calls are no-ops."""
        if self._mounted:
            return
        self._mounted = True
        await self.refresh()

    @abstractmethod
    async def refresh(self):
        """Re-fetch the list this store owns."""

    async def _mutate(self, call, fallback: str):
        self.loading = True
        self.error = None
        self._notify()
        try:
            result = await call
            await self.refresh()
            return result
        except Exception as e:
            self.error = _message(e, fallback)
            logger.warning("%s: %s", fallback, self.error)
            raise
        finally:
            self.loading = False
            self._notify()


class TaskStore(_Store):
    def __init__(self, api: TaskboardApi, initial_filters: TaskFilters | None = None):
        super().__init__(api)
        self.tasks: list[TaskRead] = []
        self.filters = initial_filters or TaskFilters()
        self._generation = 0

    async def fetch_tasks(self, filters: TaskFilters | None = None):
        if filters is not None:
            self.filters = filters
        self._generation += 1
        generation = self._generation

        self.loading = True
        self.error = None
        self._notify()
        try:
            tasks = await self.api.get_tasks(self.filters)
        except Exception as e:
            if generation == self._generation:
                self.error = _message(e, "Failed to fetch tasks")
            return
        finally:
            if generation == self._generation:
                self.loading = False
                self._notify()

        # a newer fetch started while this one was in flight
        if generation != self._generation:
            logger.debug("Dropping stale task list response (generation %s)", generation)
            return
        self.tasks = tasks
        self._notify()

    async def refresh(self):
        await self.fetch_tasks()

    async def refresh_tasks(self):
        await self.fetch_tasks()

    async def add_task(self, task_data: TaskCreate | dict):
        return await self._mutate(self.api.create_task(task_data), "Failed to create task")

    async def edit_task(self, task_id: int, task_data: TaskUpdate | dict):
        return await self._mutate(
            self.api.update_task(task_id, task_data), "Failed to update task"
        )

    async def remove_task(self, task_id: int):
        await self._mutate(self.api.delete_task(task_id), "Failed to delete task")


class CategoryStore(_Store):
    def __init__(self, api: TaskboardApi):
        super().__init__(api)
        self.categories: list[CategoryRead] = []

    async def fetch_categories(self):
        self.loading = True
        self.error = None
        self._notify()
        try:
            self.categories = await self.api.get_categories()
        except Exception as e:
            self.error = _message(e, "Failed to fetch categories")
        finally:
            self.loading = False
            self._notify()

    async def refresh(self):
        await self.fetch_categories()

    async def add_category(self, category_data: CategoryCreate | dict):
        return await self._mutate(
            self.api.create_category(category_data), "Failed to create category"
        )

    async def edit_category(self, category_id: int, category_data: CategoryUpdate | dict):
        return await self._mutate(
            self.api.update_category(category_id, category_data), "Failed to update category"
        )

    async def remove_category(self, category_id: int):
        await self._mutate(
            self.api.delete_category(category_id), "Failed to delete category"
        )
