import httpx
import pytest
import pytest_asyncio

from taskboard.core.config import get_settings
from taskboard.main import app
from taskboard.services.task_service import TaskService


@pytest_asyncio.fixture
async def crashing_client(transport, monkeypatch):
    """Client whose stats route blows up; server errors come back as responses."""

    async def explode(db):
        raise RuntimeError("kaboom")

    monkeypatch.setattr(TaskService, "get_statistics", staticmethod(explode))
    crash_transport = httpx.ASGITransport(app=app, raise_app_exceptions=False)
    async with httpx.AsyncClient(transport=crash_transport, base_url="http://test") as client:
        yield client


@pytest.fixture
def environment(monkeypatch):
    """Switch ENVIRONMENT for one test, rebuilding the cached settings."""

    def switch(name: str):
        monkeypatch.setenv("ENVIRONMENT", name)
        get_settings.cache_clear()

    yield switch
    get_settings.cache_clear()


@pytest.mark.parametrize("name", ["test", "production"])
async def test_server_error_hides_detail_outside_development(crashing_client, environment, name):
    environment(name)

    response = await crashing_client.get("/api/tasks/stats")

    assert response.status_code == 500
    assert response.json() == {"success": False, "error": "Internal server error"}


async def test_server_error_shows_detail_in_development(crashing_client, environment):
    environment("development")

    response = await crashing_client.get("/api/tasks/stats")

    assert response.status_code == 500
    assert response.json() == {
        "success": False,
        "error": "Internal server error",
        "message": "kaboom",
    }


@pytest.mark.parametrize(
    "method, path",
    [
        ("PATCH", "/api/tasks/1"),
        ("POST", "/api/tasks/1"),
        ("PUT", "/api/tasks"),
        ("DELETE", "/api/categories"),
        ("PATCH", "/health"),
    ],
)
async def test_wrong_method_is_route_not_found(client, method, path):
    response = await client.request(method, path, json={})
    assert response.status_code == 404
    assert response.json() == {"success": False, "error": "Route not found"}


async def test_trailing_slash_reaches_the_same_route(client):
    await client.post("/api/tasks", json={"title": "Slash test"})

    response = await client.get("/api/tasks/")
    assert response.status_code == 200
    assert [t["title"] for t in response.json()["data"]] == ["Slash test"]

    response = await client.get("/api/tasks/stats/")
    assert response.status_code == 200
    assert response.json()["data"]["total"] == 1

    response = await client.post("/api/categories/", json={"name": "Slashed"})
    assert response.status_code == 201


async def test_root_path_is_untouched(client):
    response = await client.get("/")
    assert response.status_code == 200
