from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable

from taskboard.models import TaskPriority, TaskStatus
from taskboard.schemas import TaskRead
from taskboard.validation import TITLE_MIN_LENGTH

Validator = Callable[[dict[str, Any]], dict[str, str]]


@dataclass
class FormState:
    """Form values plus per-field errors, cleared as the user edits."""

    initial_values: dict[str, Any]
    validate: Validator | None = None
    values: dict[str, Any] = field(init=False)
    errors: dict[str, str] = field(init=False, default_factory=dict)

    def __post_init__(self):
        self.values = dict(self.initial_values)

    def handle_change(self, name: str, value: Any):
        self.values[name] = value
        self.errors.pop(name, None)

    def reset(self):
        self.values = dict(self.initial_values)
        self.errors = {}

    async def submit(self, callback: Callable[[dict[str, Any]], Awaitable[Any]]) -> bool:
        """Run validation, then the callback. Returns False if validation blocked it."""
        if self.validate:
            errors = self.validate(self.values)
            if errors:
                self.errors = errors
                return False
        await callback(dict(self.values))
        return True


def validate_task_form(values: dict[str, Any]) -> dict[str, str]:
    errors = {}
    title = values.get("title") or ""
    if len(title.strip()) < TITLE_MIN_LENGTH:
        errors["title"] = f"Title must be at least {TITLE_MIN_LENGTH} characters"
    return errors


def task_form_values(task: TaskRead | None = None) -> dict[str, Any]:
    """Initial form values for creating (no task) or editing a task."""
    if task is None:
        return {
            "title": "",
            "description": "",
            "status": TaskStatus.PENDING.value,
            "priority": TaskPriority.MEDIUM.value,
            "due_date": "",
            "category_id": None,
        }
    return {
        "title": task.title,
        "description": task.description or "",
        "status": task.status,
        "priority": task.priority,
        "due_date": task.due_date.date().isoformat() if task.due_date else "",
        "category_id": task.category_id,
    }


def task_payload(values: dict[str, Any]) -> dict[str, Any]:
    """Turn form values into a camelCase request body, dropping blank optionals."""
    payload = {
        "title": values.get("title", ""),
        "description": values.get("description") or "",
        "status": values.get("status") or TaskStatus.PENDING.value,
        "priority": values.get("priority") or TaskPriority.MEDIUM.value,
    }
    if values.get("due_date"):
        payload["dueDate"] = values["due_date"]
    if values.get("category_id"):
        payload["categoryId"] = values["category_id"]
    return payload
