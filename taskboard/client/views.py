"""
Presentation models for the task board.

These classes hold display state and format values; every data change goes
through the stores in ``taskboard.client.stores``.
"""

import asyncio
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Awaitable, Callable

from taskboard.client.api import TaskboardApi
from taskboard.client.forms import FormState, task_form_values, task_payload, validate_task_form
from taskboard.client.stores import CategoryStore, TaskStore
from taskboard.models import TaskPriority, TaskStatus
from taskboard.schemas import CategoryRead, TaskFilters, TaskRead, TaskStatistics

logger = logging.getLogger(__name__)

SEARCH_DEBOUNCE_SECONDS = 0.3
STATS_REFRESH_SECONDS = 30.0

PRIORITY_COLORS = {
    TaskPriority.HIGH.value: "#ef4444",
    TaskPriority.MEDIUM.value: "#f59e0b",
    TaskPriority.LOW.value: "#10b981",
}
FALLBACK_COLOR = "#6b7280"

STATUS_BADGES = {
    TaskStatus.COMPLETED.value: "✓ Completed",
    TaskStatus.IN_PROGRESS.value: "⟳ In Progress",
    TaskStatus.PENDING.value: "○ Pending",
}

# (label, statistics field, colour)
STAT_CARDS = (
    ("Total Tasks", "total", "#3b82f6"),
    ("Pending", "pending", "#f59e0b"),
    ("In Progress", "in_progress", "#8b5cf6"),
    ("Completed", "completed", "#10b981"),
    ("High Priority", "high_priority", "#ef4444"),
    ("Overdue", "overdue", "#dc2626"),
)


def next_status(status: str) -> str | None:
    """One step forward in the pending -> in_progress -> completed flow."""
    if status == TaskStatus.PENDING.value:
        return TaskStatus.IN_PROGRESS.value
    if status == TaskStatus.IN_PROGRESS.value:
        return TaskStatus.COMPLETED.value
    return None


class Debouncer:
    """Calls ``callback`` with the latest value once input has been quiet for ``delay`` seconds."""

    def __init__(self, callback: Callable[[Any], Awaitable[None]], delay: float = SEARCH_DEBOUNCE_SECONDS):
        self.callback = callback
        self.delay = delay
        self._pending: asyncio.Task | None = None

    def push(self, value: Any):
        self.cancel()
        self._pending = asyncio.get_running_loop().create_task(self._fire(value))

    async def _fire(self, value: Any):
        await asyncio.sleep(self.delay)
        await self.callback(value)

    def cancel(self):
        if self._pending and not self._pending.done():
            self._pending.cancel()
        self._pending = None

    async def flush(self):
        """Wait for the pending call, if any (mostly for shutdown and tests)."""
        if self._pending:
            await asyncio.gather(self._pending, return_exceptions=True)


# Dashboard


@dataclass(frozen=True)
class StatCard:
    title: str
    value: int
    color: str


def build_stat_cards(stats: TaskStatistics) -> list[StatCard]:
    return [StatCard(title, getattr(stats, name), color) for title, name, color in STAT_CARDS]


def overdue_banner(stats: TaskStatistics) -> str | None:
    if stats.overdue <= 0:
        return None
    return f"You have {stats.overdue} overdue task{'s' if stats.overdue != 1 else ''}"


class Dashboard:
    """Statistics cards, refreshed on a fixed interval independent of other state."""

    def __init__(self, api: TaskboardApi, interval: float = STATS_REFRESH_SECONDS):
        self.api = api
        self.interval = interval
        self.stats: TaskStatistics | None = None
        self.loading = True
        self._poller: asyncio.Task | None = None

    @property
    def cards(self) -> list[StatCard]:
        return build_stat_cards(self.stats) if self.stats else []

    @property
    def banner(self) -> str | None:
        return overdue_banner(self.stats) if self.stats else None

    async def refresh(self):
        try:
            self.stats = await self.api.get_task_stats()
        except Exception as e:
            logger.error("Failed to fetch statistics: %s", e)
        finally:
            self.loading = False

    async def _poll(self):
        while True:
            await self.refresh()
            await asyncio.sleep(self.interval)

    def start(self):
        if self._poller is None or self._poller.done():
            self._poller = asyncio.get_running_loop().create_task(self._poll())

    async def stop(self):
        if self._poller is None:
            return
        self._poller.cancel()
        try:
            await self._poller
        except asyncio.CancelledError:
            pass
        self._poller = None


# Filters


class FilterPanel:
    """
    Search box plus category/status/priority selects.

    Dropdown changes apply at once; search text is debounced. Every change
    emits the full current filter set to ``on_filter_change``.
    """

    def __init__(
        self,
        on_filter_change: Callable[[TaskFilters], Awaitable[None]],
        categories: list[CategoryRead] | None = None,
        debounce: float = SEARCH_DEBOUNCE_SECONDS,
    ):
        self.on_filter_change = on_filter_change
        self.categories = categories or []
        self.search = ""
        self.applied_search = ""
        self.category_id: int | None = None
        self.status: str | None = None
        self.priority: str | None = None
        self._debouncer = Debouncer(self._apply_search, debounce)

    @property
    def category_options(self) -> list[tuple[int | None, str]]:
        return [(None, "All Categories")] + [(c.id, c.name) for c in self.categories]

    def current_filters(self) -> TaskFilters:
        return TaskFilters(
            search=self.applied_search or None,
            category_id=self.category_id,
            status=self.status,
            priority=self.priority,
        )

    def set_search(self, text: str):
        self.search = text
        self._debouncer.push(text)

    async def _apply_search(self, text: str):
        self.applied_search = text
        await self.on_filter_change(self.current_filters())

    async def select_category(self, category_id: int | None):
        self.category_id = category_id
        await self.on_filter_change(self.current_filters())

    async def select_status(self, status: str | None):
        self.status = status or None
        await self.on_filter_change(self.current_filters())

    async def select_priority(self, priority: str | None):
        self.priority = priority or None
        await self.on_filter_change(self.current_filters())

    async def reset(self):
        self._debouncer.cancel()
        self.search = self.applied_search = ""
        self.category_id = self.status = self.priority = None
        await self.on_filter_change(TaskFilters())

    async def flush(self):
        await self._debouncer.flush()


# Task cards and list


@dataclass(frozen=True)
class TaskCardView:
    id: int
    title: str
    description: str | None
    priority_label: str
    priority_color: str
    status_badge: str
    category_name: str | None
    category_color: str | None
    due_label: str | None
    is_overdue: bool
    next_status: str | None
    action_label: str | None

    @classmethod
    def from_task(cls, task: TaskRead, now: datetime | None = None) -> "TaskCardView":
        now = now or datetime.now(timezone.utc)
        overdue = False
        due_label = None
        if task.due_date:
            due = task.due_date
            if due.tzinfo is None:
                due = due.replace(tzinfo=timezone.utc)
            overdue = due < now and task.status != TaskStatus.COMPLETED.value
            due_label = f"Due: {due.date().isoformat()}" + (" (Overdue)" if overdue else "")

        upcoming = next_status(task.status)
        action = None
        if upcoming == TaskStatus.IN_PROGRESS.value:
            action = "Start"
        elif upcoming == TaskStatus.COMPLETED.value:
            action = "Complete"

        return cls(
            id=task.id,
            title=task.title,
            description=task.description or None,
            priority_label=task.priority.upper(),
            priority_color=PRIORITY_COLORS.get(task.priority, FALLBACK_COLOR),
            status_badge=STATUS_BADGES.get(task.status, task.status),
            category_name=task.category.name if task.category else None,
            category_color=task.category.color if task.category else None,
            due_label=due_label,
            is_overdue=overdue,
            next_status=upcoming,
            action_label=action,
        )


class TaskListView:
    """Task cards plus the create/edit modal."""

    def __init__(self, store: TaskStore):
        self.store = store
        self.show_form = False
        self.editing_task: TaskRead | None = None
        self.form = FormState(task_form_values(), validate_task_form)

    @property
    def cards(self) -> list[TaskCardView]:
        return [TaskCardView.from_task(task) for task in self.store.tasks]

    @property
    def form_title(self) -> str:
        return "Edit Task" if self.editing_task else "Create New Task"

    def open_create(self):
        self.editing_task = None
        self.form = FormState(task_form_values(), validate_task_form)
        self.show_form = True

    def open_edit(self, task: TaskRead):
        self.editing_task = task
        self.form = FormState(task_form_values(task), validate_task_form)
        self.show_form = True

    def cancel(self):
        self.show_form = False
        self.editing_task = None

    async def submit(self) -> bool:
        """Submit the modal form; it stays open if validation or the request fails."""

        async def save(values):
            if self.editing_task:
                await self.store.edit_task(self.editing_task.id, task_payload(values))
            else:
                await self.store.add_task(task_payload(values))

        submitted = await self.form.submit(save)
        if submitted:
            self.cancel()
        return submitted

    async def advance_status(self, task: TaskRead):
        upcoming = next_status(task.status)
        if upcoming is None:
            return
        await self.store.edit_task(task.id, {"status": upcoming})

    async def delete(self, task_id: int):
        await self.store.remove_task(task_id)


class TaskboardPage:
    """Top-level wiring: filters lifted here and pushed into the task store."""

    def __init__(self, api: TaskboardApi, stats_interval: float = STATS_REFRESH_SECONDS):
        self.api = api
        self.tasks = TaskStore(api)
        self.categories = CategoryStore(api)
        self.dashboard = Dashboard(api, interval=stats_interval)
        self.filter_panel = FilterPanel(self.handle_filter_change)
        self.task_list = TaskListView(self.tasks)

    async def mount(self):
        await self.categories.mount()
        self.filter_panel.categories = self.categories.categories
        await self.tasks.mount()
        self.dashboard.start()

    async def unmount(self):
        await self.filter_panel.flush()
        await self.dashboard.stop()

    async def handle_filter_change(self, filters: TaskFilters):
        await self.tasks.fetch_tasks(filters)

    @property
    def error_banner(self) -> str | None:
        """Page-level error shown instead of the board when the list failed to load."""
        return self.tasks.error
