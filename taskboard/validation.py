"""
Field normalization for task and category payloads.

Each validator takes the fields a caller actually supplied (``exclude_unset``
dumps, so partial updates only check what they touch) and returns a
``ValidationResult``: either the cleaned dict or the first error message.
Nothing here touches the database; uniqueness and referential checks belong
to the services and the store.
"""

import re
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

from taskboard.models import TaskPriority, TaskStatus

TITLE_MIN_LENGTH = 3
TITLE_MAX_LENGTH = 200
CATEGORY_NAME_MIN_LENGTH = 2
CATEGORY_NAME_MAX_LENGTH = 50

HEX_COLOR_RE = re.compile(r"^#[0-9A-Fa-f]{6}$")

_STATUSES = {s.value for s in TaskStatus}
_PRIORITIES = {p.value for p in TaskPriority}


@dataclass(frozen=True)
class ValidationResult:
    ok: bool
    data: dict[str, Any] = field(default_factory=dict)
    error: str | None = None

    @classmethod
    def success(cls, data: dict[str, Any]) -> "ValidationResult":
        return cls(ok=True, data=data)

    @classmethod
    def failure(cls, error: str) -> "ValidationResult":
        return cls(ok=False, error=error)


def is_valid_hex_color(color: str) -> bool:
    return bool(HEX_COLOR_RE.match(color))


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc)


def validate_task_data(data: dict[str, Any]) -> ValidationResult:
    validated: dict[str, Any] = {}

    if "title" in data:
        title = (data["title"] or "").strip()
        if len(title) < TITLE_MIN_LENGTH:
            return ValidationResult.failure(
                f"Title must be at least {TITLE_MIN_LENGTH} characters long"
            )
        if len(title) > TITLE_MAX_LENGTH:
            return ValidationResult.failure(
                f"Title must be at most {TITLE_MAX_LENGTH} characters long"
            )
        validated["title"] = title

    if "description" in data:
        description = data["description"]
        validated["description"] = description.strip() if description is not None else None

    if "status" in data:
        if data["status"] not in _STATUSES:
            return ValidationResult.failure("Invalid task status")
        validated["status"] = TaskStatus(data["status"]).value

    if "priority" in data:
        if data["priority"] not in _PRIORITIES:
            return ValidationResult.failure("Invalid task priority")
        validated["priority"] = TaskPriority(data["priority"]).value

    if "due_date" in data:
        due_date = data["due_date"]
        validated["due_date"] = _as_utc(due_date) if due_date is not None else None

    if "category_id" in data:
        validated["category_id"] = data["category_id"]

    return ValidationResult.success(validated)


def validate_category_data(data: dict[str, Any]) -> ValidationResult:
    validated: dict[str, Any] = {}

    if "name" in data:
        name = (data["name"] or "").strip()
        if not CATEGORY_NAME_MIN_LENGTH <= len(name) <= CATEGORY_NAME_MAX_LENGTH:
            return ValidationResult.failure(
                f"Category name must be between {CATEGORY_NAME_MIN_LENGTH} "
                f"and {CATEGORY_NAME_MAX_LENGTH} characters"
            )
        validated["name"] = name

    if "color" in data:
        color = data["color"]
        if color is None or not is_valid_hex_color(color):
            return ValidationResult.failure(
                "Invalid color format. Must be a valid hex color (e.g., #FF5733)"
            )
        validated["color"] = color

    return ValidationResult.success(validated)
