from datetime import datetime, timedelta, timezone

import pytest


async def _create(client, **body):
    response = await client.post("/api/tasks", json=body)
    assert response.status_code == 201, response.text
    return response.json()["data"]


async def test_create_then_get_round_trip(client):
    response = await client.post("/api/tasks", json={"title": "Buy milk"})

    assert response.status_code == 201
    body = response.json()
    assert body["success"] is True
    assert body["message"] == "Task created successfully"
    assert "error" not in body
    data = body["data"]
    assert data["title"] == "Buy milk"
    assert data["status"] == "pending"
    assert data["priority"] == "medium"
    assert data["categoryId"] is None
    assert "createdAt" in data and "updatedAt" in data

    response = await client.get(f"/api/tasks/{data['id']}")
    assert response.status_code == 200
    fetched = response.json()["data"]
    assert fetched["id"] == data["id"]
    assert fetched["title"] == "Buy milk"
    assert fetched["category"] is None


async def test_get_missing_task_is_404(client):
    response = await client.get("/api/tasks/9999")
    assert response.status_code == 404
    assert response.json() == {"success": False, "error": "Task not found"}


@pytest.mark.parametrize("bad_id", ["abc", "0", "-3", "1.5"])
async def test_invalid_id_is_400(client, bad_id):
    response = await client.get(f"/api/tasks/{bad_id}")
    assert response.status_code == 400
    assert response.json() == {"success": False, "error": "Invalid ID parameter"}


@pytest.mark.parametrize("body", [{}, {"title": ""}, {"title": None}, {"description": "x"}])
async def test_create_requires_title(client, body):
    response = await client.post("/api/tasks", json=body)
    assert response.status_code == 400
    assert response.json()["error"] == "Missing required fields: title"


async def test_create_without_body_requires_title(client):
    response = await client.post("/api/tasks")
    assert response.status_code == 400
    assert response.json()["error"] == "Missing required fields: title"


async def test_short_title_is_400_and_not_persisted(client):
    response = await client.post("/api/tasks", json={"title": "  ab  "})
    assert response.status_code == 400
    assert response.json() == {
        "success": False,
        "error": "Title must be at least 3 characters long",
    }

    listing = await client.get("/api/tasks")
    assert listing.json()["data"] == []


async def test_wrong_field_type_is_validation_error(client):
    response = await client.post("/api/tasks", json={"title": "Valid", "categoryId": "abc"})
    assert response.status_code == 400
    body = response.json()
    assert body["success"] is False
    assert body["error"] == "Validation error"
    assert "categoryId" in body["message"]


async def test_unknown_category_is_rejected_by_store(client):
    response = await client.post("/api/tasks", json={"title": "Orphan", "categoryId": 4242})
    assert response.status_code == 400
    assert response.json()["error"] == "Validation error"


async def test_create_with_category_includes_join(client, category):
    data = await _create(client, title="Pick up parcel", categoryId=category.id)
    assert data["category"] == {"id": category.id, "name": "Errands", "color": "#3b82f6"}


async def test_list_filters(client, category):
    await _create(client, title="Pending low", priority="low")
    await _create(client, title="Pending high", priority="high", categoryId=category.id)
    await _create(client, title="Finished high", priority="high", status="completed")

    response = await client.get("/api/tasks", params={"status": "pending"})
    assert sorted(t["title"] for t in response.json()["data"]) == ["Pending high", "Pending low"]

    response = await client.get("/api/tasks", params={"status": "pending", "priority": "high"})
    assert [t["title"] for t in response.json()["data"]] == ["Pending high"]

    response = await client.get("/api/tasks", params={"categoryId": category.id})
    assert [t["title"] for t in response.json()["data"]] == ["Pending high"]

    response = await client.get("/api/tasks", params={"search": "finished"})
    assert [t["title"] for t in response.json()["data"]] == ["Finished high"]

    response = await client.get("/api/tasks", params={"status": ""})
    assert len(response.json()["data"]) == 3


async def test_update_is_partial(client, category):
    created = await _create(client, title="Draft post", priority="low")

    response = await client.put(
        f"/api/tasks/{created['id']}",
        json={"status": "in_progress", "categoryId": category.id},
    )
    assert response.status_code == 200
    body = response.json()
    assert body["message"] == "Task updated successfully"
    assert body["data"]["title"] == "Draft post"
    assert body["data"]["priority"] == "low"
    assert body["data"]["status"] == "in_progress"
    assert body["data"]["category"]["name"] == "Errands"


async def test_update_rejects_invalid_priority(client):
    created = await _create(client, title="Draft post")
    response = await client.put(f"/api/tasks/{created['id']}", json={"priority": "urgent"})
    assert response.status_code == 400
    assert response.json()["error"] == "Invalid task priority"


async def test_update_missing_task_is_404(client):
    response = await client.put("/api/tasks/9999", json={"title": "Nobody home"})
    assert response.status_code == 404
    assert response.json()["error"] == "Task not found"


async def test_delete(client):
    created = await _create(client, title="Short lived")

    response = await client.delete(f"/api/tasks/{created['id']}")
    assert response.status_code == 200
    assert response.json() == {"success": True, "message": "Task deleted successfully"}

    response = await client.delete(f"/api/tasks/{created['id']}")
    assert response.status_code == 404


async def test_stats_route_is_not_parsed_as_id(client):
    past = (datetime.now(timezone.utc) - timedelta(days=5)).isoformat()
    await _create(client, title="Late one", dueDate=past, priority="high")
    await _create(client, title="Late but done", dueDate=past, status="completed")
    await _create(client, title="Started", status="in_progress")

    response = await client.get("/api/tasks/stats")
    assert response.status_code == 200
    assert response.json() == {
        "success": True,
        "data": {
            "total": 3,
            "pending": 1,
            "inProgress": 1,
            "completed": 1,
            "highPriority": 1,
            "overdue": 1,
        },
    }


async def test_date_only_due_date_is_accepted(client):
    data = await _create(client, title="Pay rent", dueDate="2030-01-31")
    assert data["dueDate"].startswith("2030-01-31")


async def test_snake_case_body_is_accepted(client, category):
    data = await _create(client, title="Snake case", category_id=category.id)
    assert data["categoryId"] == category.id


async def test_unknown_route_envelope(client):
    response = await client.get("/api/nothing-here")
    assert response.status_code == 404
    assert response.json() == {"success": False, "error": "Route not found"}


async def test_health(client):
    response = await client.get("/health")
    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "ok"
    assert datetime.fromisoformat(body["timestamp"])


async def test_root_welcome(client):
    response = await client.get("/")
    assert response.status_code == 200
    body = response.json()
    assert body["message"] == "Welcome to Taskboard API"
    assert body["docs"] == "/docs"
