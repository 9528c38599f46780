"""
    Farm Inventory Service API

    This module implements a FastAPI-based service for tracking farm inventory
    items (parts and supplies, the vehicles they fit, and their low-stock
    thresholds) with MongoDB persistence.

    The service exposes:
    - CRUD endpoints for inventory items under /api/items
    - A low-stock listing of items at or below their threshold
    - Information (/) and health (/health) endpoints that keep working when
      MongoDB is unreachable ("fallback mode"); data endpoints answer 503 then

    Run with:
        uvicorn farm_inventory.main:app
"""
import asyncio
import logging
import time
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import List, Optional

from fastapi import APIRouter, Depends, FastAPI, HTTPException, Request, status
from pymongo.collection import Collection
from starlette.concurrency import run_in_threadpool

from . import __version__, crud, schemas, validators
from .config import Settings
from .database import Database, get_database, get_items_collection
from .errors import AVAILABLE_ROUTES, DatabaseUnavailable, register_exception_handlers
from .lifecycle import asyncio_exception_handler

logger = logging.getLogger(__name__)

ENDPOINTS = {
    "GET /": "API information",
    "GET /health": "Health check",
    "GET /api/items": "Get all inventory items",
    "POST /api/items": "Create a new inventory item",
    "GET /api/items/low-stock": "Get low stock items",
    "GET /api/items/:id": "Get a specific item",
    "PUT /api/items/:id": "Update an item",
    "DELETE /api/items/:id": "Delete an item",
}


def require_database(database: Database = Depends(get_database)) -> None:
    """
    Availability gate for every route that touches the items collection.

    Raises:
        DatabaseUnavailable: if MongoDB is not connected (rendered as 503)
    """
    if not database.tracker.is_connected:
        raise DatabaseUnavailable()


def parse_item_id(item_id: str):
    object_id = validators.parse_item_id(item_id)
    if object_id is None:
        raise HTTPException(status_code=400, detail=validators.ItemValidationError.INVALID_ID.value)
    return object_id


info = APIRouter(tags=["Information"])
items = APIRouter(prefix="/api/items", tags=["Inventory"], dependencies=[Depends(require_database)])


@info.get("/")
def read_root():
    """
    API information endpoint.

    Example:
        GET /
        Response: {"message": "Farm Inventory App Backend is running!", "status": "ok", ...}
    """
    return {
        "message": "Farm Inventory App Backend is running!",
        "status": "ok",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "endpoints": ENDPOINTS,
    }


@info.get("/health")
def health(request: Request, database: Database = Depends(get_database)):
    """
    Health check endpoint for the inventory service.

    Never gated: it reports the database state instead of failing when MongoDB is down.

    Returns:
        dict: uptime (seconds), message, timestamp (epoch milliseconds) and
            database ("connected" or "disconnected")
    """
    return {
        "uptime": time.monotonic() - request.app.state.started_at,
        "message": "OK",
        "timestamp": int(time.time() * 1000),
        "database": "connected" if database.tracker.is_connected else "disconnected",
    }


# Registered before /{item_id} so "low-stock" is not taken for an item ID
@items.get("/low-stock", response_model=List[schemas.InventoryItem])
def list_low_stock_items(collection: Collection = Depends(get_items_collection)):
    """List items whose quantity is at or below their low-stock threshold."""
    return crud.get_low_stock_items(collection)


@items.get("", response_model=List[schemas.InventoryItem])
def list_inventory_items(collection: Collection = Depends(get_items_collection)):
    """
    List all inventory items.

    Args:
        collection: Items collection (injected)

    Returns:
        List of inventory item objects
    """
    return crud.get_inventory_items(collection)


@items.get("/{item_id}", response_model=schemas.InventoryItem)
def get_inventory_item(item_id: str, collection: Collection = Depends(get_items_collection)):
    """
    Get a single inventory item by ID.

    Raises:
        HTTPException: 400 if the ID is malformed, 404 if item not found
    """
    item = crud.get_inventory_item(collection, parse_item_id(item_id))
    if item is None:
        raise HTTPException(status_code=404, detail="Item not found")
    return item


@items.post("", response_model=schemas.InventoryItem, status_code=status.HTTP_201_CREATED)
def create_inventory_item(item: schemas.InventoryItemCreate, collection: Collection = Depends(get_items_collection)):
    """
    Create a new inventory item.

    Args:
        item: Inventory item data to create
        collection: Items collection (injected)

    Returns:
        Created inventory item object, including its assigned ID

    Raises:
        HTTPException: 400 if the name is missing or blank
    """
    problem = validators.validate_new_item(item)
    if problem is not None:
        raise HTTPException(status_code=400, detail=problem.value)
    return crud.create_inventory_item(collection, item)


@items.put("/{item_id}", response_model=schemas.InventoryItem)
def update_inventory_item(
    item_id: str,
    item: schemas.InventoryItemUpdate,
    collection: Collection = Depends(get_items_collection)
):
    """
    Update an existing inventory item.

    Only the supplied fields change; everything else keeps its stored value.

    Raises:
        HTTPException: 400 if the ID is malformed or a field is invalid, 404 if item not found
    """
    object_id = parse_item_id(item_id)
    changes = item.changes()
    problem = validators.validate_item_update(changes)
    if problem is not None:
        raise HTTPException(status_code=400, detail=problem.value)

    updated = crud.update_inventory_item(collection, object_id, changes)
    if updated is None:
        raise HTTPException(status_code=404, detail="Item not found")
    return updated


@items.delete("/{item_id}", response_model=schemas.Message)
def delete_inventory_item(item_id: str, collection: Collection = Depends(get_items_collection)):
    """
    Delete an inventory item.

    Raises:
        HTTPException: 400 if the ID is malformed, 404 if item not found
    """
    if not crud.delete_inventory_item(collection, parse_item_id(item_id)):
        raise HTTPException(status_code=404, detail="Item not found")
    return {"message": "Item deleted successfully"}


def log_startup_banner(settings: Settings, database: Database) -> None:
    connected = database.tracker.is_connected
    logger.info("=" * 60)
    logger.info("Farm Inventory App Backend Server Started")
    logger.info("=" * 60)
    logger.info(f"Server listening on port {settings.port}")
    logger.info(f"Local URL: http://localhost:{settings.port}")
    logger.info(f"Database Status: {'Connected' if connected else 'Disconnected (running in fallback mode)'}")
    logger.info(f"Started at: {datetime.now(timezone.utc).isoformat()}")
    logger.info(f"Environment: {settings.environment}")
    logger.info("=" * 60)
    logger.info("Available endpoints:")
    for route in AVAILABLE_ROUTES:
        logger.info(f"  {route}")
    if not connected:
        logger.warning("TIP: Set MONGODB_URI environment variable to enable database features")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Connect to MongoDB on startup (without ever failing startup) and close it on shutdown."""
    asyncio.get_running_loop().set_exception_handler(asyncio_exception_handler)
    database: Database = app.state.database
    await run_in_threadpool(database.connect)
    log_startup_banner(app.state.settings, database)
    yield
    logger.info("Shutting down gracefully...")
    app.state.shutdown_clean = await run_in_threadpool(database.close)


def create_app(settings: Optional[Settings] = None, database: Optional[Database] = None) -> FastAPI:
    """
    Build the application.

    Args:
        settings: Runtime settings, read from the environment when omitted
        database: Database to use, built from the settings when omitted

    Returns:
        FastAPI: Configured application; MongoDB is connected by its lifespan
    """
    settings = settings or Settings.from_env()
    app = FastAPI(title="farm-inventory-service", version=__version__, lifespan=lifespan)
    app.state.settings = settings
    app.state.database = database or Database(settings)
    app.state.started_at = time.monotonic()
    app.state.shutdown_clean = True

    app.include_router(info)
    app.include_router(items)
    register_exception_handlers(app)
    return app


app = create_app()
