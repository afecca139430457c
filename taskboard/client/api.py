"""
Async HTTP client for the Taskboard API.

Every call unwraps the ``{success, data, error, message}`` envelope and
returns typed schemas; a non-2xx response raises ``ApiClientError`` carrying
the envelope's ``error`` text.
"""

import logging
from typing import Any

import httpx

from taskboard.schemas import (
    CategoryCreate,
    CategoryRead,
    CategoryUpdate,
    TaskCreate,
    TaskFilters,
    TaskRead,
    TaskStatistics,
    TaskUpdate,
)

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "http://localhost:4000/api"


class ApiClientError(Exception):
    def __init__(self, message: str, status_code: int | None = None):
        self.message = message
        self.status_code = status_code
        super().__init__(message)


def _body(payload) -> dict:
    if payload is None:
        return {}
    if isinstance(payload, dict):
        return payload
    return payload.model_dump(mode="json", by_alias=True, exclude_unset=True)


class TaskboardApi:
    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        client: httpx.AsyncClient | None = None,
        timeout: float = 10.0,
    ):
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(base_url=base_url, timeout=timeout)

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc):
        await self.aclose()

    async def aclose(self):
        if self._owns_client:
            await self._client.aclose()

    async def _request(self, method: str, endpoint: str, **kwargs) -> dict[str, Any]:
        try:
            response = await self._client.request(method, endpoint, **kwargs)
        except httpx.HTTPError as e:
            logger.error("API error: %s %s: %s", method, endpoint, e)
            raise ApiClientError(str(e) or "Network error") from e

        try:
            envelope = response.json()
        except ValueError:
            envelope = {}

        if response.is_error:
            message = envelope.get("error") or "An error occurred"
            logger.error("API error: %s %s -> %s %s", method, endpoint, response.status_code, message)
            raise ApiClientError(message, response.status_code)
        return envelope

    # Tasks

    async def get_tasks(self, filters: TaskFilters | None = None) -> list[TaskRead]:
        params = filters.to_query_params() if filters else {}
        envelope = await self._request("GET", "/tasks", params=params)
        return [TaskRead.model_validate(item) for item in envelope.get("data") or []]

    async def get_task(self, task_id: int) -> TaskRead:
        envelope = await self._request("GET", f"/tasks/{task_id}")
        if not envelope.get("data"):
            raise ApiClientError("Task not found")
        return TaskRead.model_validate(envelope["data"])

    async def create_task(self, task_data: TaskCreate | dict) -> TaskRead:
        envelope = await self._request("POST", "/tasks", json=_body(task_data))
        if not envelope.get("data"):
            raise ApiClientError("Failed to create task")
        return TaskRead.model_validate(envelope["data"])

    async def update_task(self, task_id: int, task_data: TaskUpdate | dict) -> TaskRead:
        envelope = await self._request("PUT", f"/tasks/{task_id}", json=_body(task_data))
        if not envelope.get("data"):
            raise ApiClientError("Failed to update task")
        return TaskRead.model_validate(envelope["data"])

    async def delete_task(self, task_id: int) -> None:
        await self._request("DELETE", f"/tasks/{task_id}")

    async def get_task_stats(self) -> TaskStatistics:
        envelope = await self._request("GET", "/tasks/stats")
        if not envelope.get("data"):
            raise ApiClientError("Failed to fetch statistics")
        return TaskStatistics.model_validate(envelope["data"])

    # Categories

    async def get_categories(self) -> list[CategoryRead]:
        envelope = await self._request("GET", "/categories")
        return [CategoryRead.model_validate(item) for item in envelope.get("data") or []]

    async def get_category(self, category_id: int) -> CategoryRead:
        envelope = await self._request("GET", f"/categories/{category_id}")
        if not envelope.get("data"):
            raise ApiClientError("Category not found")
        return CategoryRead.model_validate(envelope["data"])

    async def create_category(self, category_data: CategoryCreate | dict) -> CategoryRead:
        envelope = await self._request("POST", "/categories", json=_body(category_data))
        if not envelope.get("data"):
            raise ApiClientError("Failed to create category")
        return CategoryRead.model_validate(envelope["data"])

    async def update_category(
        self, category_id: int, category_data: CategoryUpdate | dict
    ) -> CategoryRead:
        envelope = await self._request(
            "PUT", f"/categories/{category_id}", json=_body(category_data)
        )
        if not envelope.get("data"):
            raise ApiClientError("Failed to update category")
        return CategoryRead.model_validate(envelope["data"])

    async def delete_category(self, category_id: int) -> None:
        await self._request("DELETE", f"/categories/{category_id}")
