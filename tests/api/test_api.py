"""HTTP-level tests: routing, the initialization gate and error mapping."""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi.testclient import TestClient

from app.api.dependencies import (
    get_auth_service,
    get_image_service,
    get_initialization_service,
    get_supabase,
)
from app.features.initialization.domain import (
    AppInitialization,
    InitializationResult,
    InitializationState,
)
from app.features.initialization.service import InitializationGate
from app.main import create_app
from app.middleware.auth import get_current_user_id
from app.services.errors import AlreadyInitializedError, UpstreamServiceError
from app.services.image import ImageService
from tests.factories import profile_row, todo_row


def _gate(initialized: bool) -> InitializationGate:
    return InitializationGate(AsyncMock(return_value=AppInitialization(initialized=initialized)))


@pytest.fixture()
def app(fake_client):
    application = create_app(_gate(initialized=True))
    application.dependency_overrides[get_supabase] = lambda: fake_client
    application.dependency_overrides[get_current_user_id] = lambda: "user-1"
    application.dependency_overrides[get_image_service] = lambda: ImageService(cloud_name="", upload_preset="")
    return application


@pytest.fixture()
def client(app):
    return TestClient(app)


# ---------------------------------------------------------------------------
# todos
# ---------------------------------------------------------------------------


def test_list_todos_with_filters(client, fake_client):
    fake_client.tables["todos"] = [
        todo_row("1", "Buy milk", category="Home"),
        todo_row("2", "Report", category="Work", priority="high"),
        todo_row("3", "Other user", user_id="user-2"),
    ]

    response = client.get("/api/todos", params={"category": "Work"})

    assert response.status_code == 200
    body = response.json()
    assert [t["id"] for t in body["todos"]] == ["2"]
    assert body["stats"]["total"] == 2
    assert body["priority_counts"] == {"low": 0, "medium": 1, "high": 1}


def test_create_todo_with_blank_title_is_a_field_error(client, fake_client):
    response = client.post("/api/todos", json={"title": "  "})

    assert response.status_code == 422
    assert response.json() == {"field": "title", "message": "Title is required"}
    assert "todos" not in fake_client.tables


def test_create_then_toggle_and_delete(client):
    created = client.post("/api/todos", json={"title": "Buy bread", "category": "Courses"})
    assert created.status_code == 201
    todo_id = created.json()["todo"]["id"]

    toggled = client.patch(f"/api/todos/{todo_id}/completed", json={"completed": True})
    assert toggled.json()["todo"]["completed"] is True

    assert client.delete(f"/api/todos/{todo_id}").json()["success"] is True
    assert client.get(f"/api/todos/{todo_id}").status_code == 404


def test_foreign_todo_is_not_found(client, fake_client):
    fake_client.tables["todos"] = [todo_row("x", user_id="user-2")]

    assert client.get("/api/todos/x").status_code == 404
    assert client.put("/api/todos/x", json={"title": "Mine now"}).status_code == 404


def test_bulk_complete(client, fake_client):
    fake_client.tables["todos"] = [todo_row("1"), todo_row("2"), todo_row("3", user_id="user-2")]

    response = client.post("/api/todos/bulk/complete", json={"todo_ids": ["1", "2", "3"]})

    assert response.json() == {"count": 2}


def test_due_range_must_be_ordered(client):
    response = client.get(
        "/api/todos/due",
        params={"start": "2024-05-10T00:00:00Z", "end": "2024-05-01T00:00:00Z"},
    )

    assert response.status_code == 422
    assert response.json()["field"] == "start"


def test_update_with_null_priority_is_a_field_error(client, fake_client):
    fake_client.tables["todos"] = [todo_row("1")]

    response = client.put("/api/todos/1", json={"priority": None})

    assert response.status_code == 422
    assert response.json()["field"] == "priority"
    assert fake_client.tables["todos"][0]["priority"] == "medium"
    assert client.get("/api/todos").status_code == 200


def test_due_range_accepts_mixed_timezone_params(client, fake_client):
    fake_client.tables["todos"] = [todo_row("1", due_date="2026-01-01T12:00:00+00:00")]

    response = client.get(
        "/api/todos/due",
        params={"start": "2026-01-01T00:00:00", "end": "2026-01-02T00:00:00Z"},
    )

    assert response.status_code == 200
    assert [t["id"] for t in response.json()["todos"]] == ["1"]


def test_list_todos_keeps_completed_false_filter(client, fake_client):
    fake_client.tables["todos"] = [todo_row("1"), todo_row("2", completed=True)]

    response = client.get("/api/todos", params={"completed": "false"})

    assert [t["id"] for t in response.json()["todos"]] == ["1"]


def test_categories(client, fake_client):
    fake_client.tables["categories"] = [{"id": "1", "name": "Work"}, {"id": "2", "name": "Home"}]

    assert client.get("/api/categories").json() == {"categories": ["Home", "Work"]}


def test_todo_routes_require_a_token(app):
    del app.dependency_overrides[get_current_user_id]

    response = TestClient(app).get("/api/todos")

    assert response.status_code == 401


# ---------------------------------------------------------------------------
# users / images / auth
# ---------------------------------------------------------------------------


def test_toggle_theme_and_preferences(client, fake_client):
    fake_client.tables["user_profiles"] = [profile_row("user-1")]

    assert client.post("/api/users/me/theme/toggle").json() == {"theme": "dark"}

    response = client.put("/api/users/me/preferences", json={"language": "en"})
    assert response.json()["language"] == "en"
    assert response.json()["theme"] == "dark"
    assert client.get("/api/users/me").json()["preferences"]["language"] == "en"


def test_image_upload_falls_back_inline(client):
    response = client.post("/api/images", files={"file": ("a.png", b"\x89PNG", "image/png")})

    assert response.status_code == 200
    assert response.json()["source"] == "inline"
    assert response.json()["fallback_reason"] == "not_configured"


def test_image_upload_rejects_pdf(client):
    response = client.post("/api/images", files={"file": ("a.pdf", b"%PDF", "application/pdf")})

    assert response.status_code == 422
    assert response.json()["field"] == "image"


def test_resize_url(client):
    response = client.get(
        "/api/images/resize",
        params={"url": "https://res.cloudinary.com/demo/image/upload/sample.jpg", "width": 50, "height": 40},
    )

    assert response.json()["url"] == "https://res.cloudinary.com/demo/image/upload/c_fill,w_50,h_40/sample.jpg"


def test_login_error_uses_translated_status(app):
    auth_service = MagicMock()
    auth_service.sign_in = AsyncMock(
        side_effect=UpstreamServiceError("Wrong email or password.", code="invalid_credentials", status_code=401)
    )
    app.dependency_overrides[get_auth_service] = lambda: auth_service

    response = TestClient(app).post("/api/auth/login", json={"email": "a@b.c", "password": "x"})

    assert response.status_code == 401
    assert response.json() == {"detail": "Wrong email or password."}


# ---------------------------------------------------------------------------
# initialization gate
# ---------------------------------------------------------------------------


def test_uninitialized_app_redirects_to_initialize(fake_client):
    application = create_app(_gate(initialized=False))
    client = TestClient(application)

    response = client.get("/api/todos", follow_redirects=False)

    assert response.status_code == 307
    assert response.headers["location"] == "/api/initialize"
    assert client.get("/api/health/").json()["initialization"] == "uninitialized"


def test_initialize_route_reports_state_while_uninitialized():
    client = TestClient(create_app(_gate(initialized=False)))

    response = client.get("/api/initialize")

    assert response.status_code == 200
    assert response.json()["state"] == "uninitialized"


def test_initialized_app_redirects_away_from_initialize(client):
    response = client.get("/api/initialize", follow_redirects=False)

    assert response.status_code == 303
    assert response.headers["location"] == "/"


def test_post_initialize(fake_client):
    application = create_app(_gate(initialized=False))
    service = MagicMock()
    service.initialize = AsyncMock(return_value=InitializationResult(
        state=InitializationState.INITIALIZED,
        categories_created=["Travail"],
    ))
    application.dependency_overrides[get_initialization_service] = lambda: service

    response = TestClient(application).post("/api/initialize", json={"create_demo_account": False})

    assert response.status_code == 201
    assert response.json()["categories_created"] == ["Travail"]
    service.initialize.assert_awaited_once_with(initialized_by=None, create_demo_account=False)


def test_post_initialize_conflict():
    application = create_app(_gate(initialized=False))
    service = MagicMock()
    service.initialize = AsyncMock(side_effect=AlreadyInitializedError("already done"))
    application.dependency_overrides[get_initialization_service] = lambda: service

    response = TestClient(application).post("/api/initialize", json={})

    assert response.status_code == 409


def test_image_host_health_when_unconfigured(client):
    assert client.get("/api/health/images").json() == {"status": "not_configured"}
