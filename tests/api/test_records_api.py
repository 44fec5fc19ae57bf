"""Integration tests for the events, tasks and notes endpoints."""

import pytest
from fastapi.testclient import TestClient

from calendar_assistant.core.dependencies import get_db
from calendar_assistant.main import app


@pytest.fixture
def client(db_conn):
    app.dependency_overrides[get_db] = lambda: db_conn
    yield TestClient(app)
    app.dependency_overrides.clear()


EVENT = {"title": "Lunch with Sam", "date": "2024-06-10", "start_time": "12:00", "end_time": "13:00"}


def test_health_endpoint(client):
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


def test_create_and_list_events(client):
    created = client.post("/api/v1/events", json=EVENT)

    assert created.status_code == 201
    body = created.json()
    assert body["color"] == "#3b82f6"
    assert body["id"]

    listed = client.get("/api/v1/events")
    assert [e["title"] for e in listed.json()] == ["Lunch with Sam"]


def test_create_event_with_inverted_times_is_rejected(client):
    response = client.post("/api/v1/events", json={**EVENT, "start_time": "14:00"})

    assert response.status_code == 422


def test_patch_event(client):
    event_id = client.post("/api/v1/events", json=EVENT).json()["id"]

    response = client.patch(f"/api/v1/events/{event_id}", json={"title": "Lunch with Alex"})

    assert response.status_code == 200
    assert response.json()["title"] == "Lunch with Alex"
    assert response.json()["start_time"] == "12:00"


def test_patch_event_invalid_merge_returns_422(client):
    event_id = client.post("/api/v1/events", json=EVENT).json()["id"]

    response = client.patch(f"/api/v1/events/{event_id}", json={"end_time": "11:00"})

    assert response.status_code == 422


def test_patch_unknown_event_returns_404(client):
    response = client.patch("/api/v1/events/missing", json={"title": "x"})

    assert response.status_code == 404
    assert response.json()["detail"] == "Event 'missing' not found"


def test_delete_event_twice(client):
    event_id = client.post("/api/v1/events", json=EVENT).json()["id"]

    assert client.delete(f"/api/v1/events/{event_id}").status_code == 204
    assert client.delete(f"/api/v1/events/{event_id}").status_code == 404


def test_task_lifecycle(client):
    created = client.post("/api/v1/tasks", json={"text": "Buy milk", "priority": "high"})
    assert created.status_code == 201
    task_id = created.json()["id"]
    assert created.json()["completed"] is False

    patched = client.patch(f"/api/v1/tasks/{task_id}", json={"completed": True})
    assert patched.status_code == 200
    assert patched.json()["completed"] is True
    assert patched.json()["priority"] == "high"

    assert client.delete(f"/api/v1/tasks/{task_id}").status_code == 204
    assert client.get("/api/v1/tasks").json() == []


def test_task_rejects_unknown_priority(client):
    response = client.post("/api/v1/tasks", json={"text": "Buy milk", "priority": "urgent"})

    assert response.status_code == 422


def test_note_lifecycle(client):
    note_id = client.post("/api/v1/notes", json={"title": "Books", "content": "Dune"}).json()["id"]

    patched = client.patch(f"/api/v1/notes/{note_id}", json={"content": "Dune, Hyperion"})
    assert patched.json()["content"] == "Dune, Hyperion"

    assert client.patch("/api/v1/notes/missing", json={"content": "x"}).status_code == 404
    assert client.delete(f"/api/v1/notes/{note_id}").status_code == 204
