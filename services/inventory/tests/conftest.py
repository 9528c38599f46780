"""
Shared pytest fixtures for the Farm Inventory service tests.

MongoDB is replaced by mongomock, which accepts the same client arguments and
understands the same queries, so the real connection code path is exercised.
"""
from unittest.mock import MagicMock

import mongomock
import pytest
from fastapi.testclient import TestClient
from pymongo.errors import ServerSelectionTimeoutError

from farm_inventory.config import Settings
from farm_inventory.database import Database
from farm_inventory.main import create_app


@pytest.fixture
def settings() -> Settings:
    return Settings(mongodb_uri="mongodb://localhost:27017/farm-inventory-test")


@pytest.fixture
def database(settings):
    """A database connected to an in-memory MongoDB."""
    db = Database(settings, client_factory=mongomock.MongoClient)
    db.connect()
    yield db
    db.close()


@pytest.fixture
def items_collection(database):
    return database.items


@pytest.fixture
def client(settings, database):
    """Test client for an app whose database is already connected."""
    return TestClient(create_app(settings, database))


@pytest.fixture
def unreachable_client_factory():
    """A MongoClient stand-in whose server can never be selected."""
    factory = MagicMock()
    factory.return_value.admin.command.side_effect = ServerSelectionTimeoutError("localhost:27017: timed out")
    return factory


@pytest.fixture
def offline_database(settings, unreachable_client_factory):
    db = Database(settings, client_factory=unreachable_client_factory)
    db.connect()
    return db


@pytest.fixture
def offline_client(settings, offline_database):
    """Test client for an app running in fallback mode."""
    return TestClient(create_app(settings, offline_database))


@pytest.fixture
def oil_filter() -> dict:
    return {
        "name": "Oil Filter",
        "category": "Filters",
        "quantity": 15,
        "vehicles": ["Tractor", "Truck"],
        "lowStockThreshold": 5,
    }
