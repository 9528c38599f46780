"""Tests for the information, health and not-found responses and the application lifespan."""
from datetime import datetime

import mongomock
from fastapi.testclient import TestClient

from farm_inventory.database import ConnectionState, Database
from farm_inventory.errors import AVAILABLE_ROUTES
from farm_inventory.main import ENDPOINTS, create_app


def test_root_information(client):
    response = client.get("/")

    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "ok"
    assert body["message"] == "Farm Inventory App Backend is running!"
    assert body["endpoints"] == ENDPOINTS
    datetime.fromisoformat(body["timestamp"])


def test_health_connected(client):
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json()["database"] == "connected"


def test_unknown_route_lists_available_routes(client):
    response = client.get("/nonexistent-path")

    assert response.status_code == 404
    assert response.json() == {
        "error": "Not Found",
        "message": "Route GET /nonexistent-path not found",
        "availableRoutes": AVAILABLE_ROUTES,
    }


def test_unsupported_method_is_not_found(client):
    response = client.patch("/api/items")

    assert response.status_code == 404
    assert response.json()["message"] == "Route PATCH /api/items not found"


def test_lifespan_connects_and_closes(settings):
    database = Database(settings, client_factory=mongomock.MongoClient)
    app = create_app(settings, database)

    with TestClient(app) as client:
        assert database.tracker.state == ConnectionState.CONNECTED
        assert client.get("/health").json()["database"] == "connected"
        assert client.post("/api/items", json={"name": "PTO Shaft"}).status_code == 201

    assert database.tracker.state == ConnectionState.DISCONNECTED
    assert app.state.shutdown_clean is True


def test_lifespan_starts_without_database(settings, unreachable_client_factory):
    app = create_app(settings, Database(settings, client_factory=unreachable_client_factory))

    with TestClient(app) as client:
        assert client.get("/").status_code == 200
        assert client.get("/api/items").status_code == 503

    assert app.state.shutdown_clean is True
