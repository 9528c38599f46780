"""
CRUD (Create, Read, Update, Delete) operations for the Farm Inventory service.

This module contains all database operations for inventory management. Each
function issues exactly one call to the items collection.
"""
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from bson import ObjectId
from pymongo import ReturnDocument
from pymongo.collection import Collection

from . import models, schemas


def _now() -> datetime:
    # MongoDB stores datetimes with millisecond precision
    now = datetime.now(timezone.utc)
    return now.replace(microsecond=now.microsecond // 1000 * 1000)


def get_inventory_items(items: Collection) -> List[Dict[str, Any]]:
    """
    Retrieve all inventory items in insertion order.

    Args:
        items: Items collection

    Returns:
        List of item documents
    """
    return list(items.find())


def get_low_stock_items(items: Collection) -> List[Dict[str, Any]]:
    """
    Retrieve the items whose quantity is at or below their low-stock threshold.

    Args:
        items: Items collection

    Returns:
        List of item documents
    """
    return list(items.find(models.LOW_STOCK_FILTER))


def get_inventory_item(items: Collection, item_id: ObjectId) -> Optional[Dict[str, Any]]:
    """
    Retrieve a single inventory item by ID.

    Args:
        items: Items collection
        item_id: ID of the inventory item to retrieve

    Returns:
        Item document or None if not found
    """
    return items.find_one({"_id": item_id})


def create_inventory_item(items: Collection, item: schemas.InventoryItemCreate) -> Dict[str, Any]:
    """
    Create a new inventory item in the database.

    Args:
        items: Items collection
        item: Inventory item data to create

    Returns:
        Created item document, including its assigned ID
    """
    document = item.to_document()
    now = _now()
    document["createdAt"] = now
    document["updatedAt"] = now
    result = items.insert_one(document)
    document["_id"] = result.inserted_id
    return document


def update_inventory_item(items: Collection, item_id: ObjectId, changes: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    """
    Update an existing inventory item.

    Args:
        items: Items collection
        item_id: ID of the inventory item to update
        changes: Fields to set; fields not listed keep their stored values

    Returns:
        Updated item document or None if not found
    """
    update = dict(changes)
    update["updatedAt"] = _now()
    return items.find_one_and_update(
        {"_id": item_id},
        {"$set": update},
        return_document=ReturnDocument.AFTER,
    )


def delete_inventory_item(items: Collection, item_id: ObjectId) -> bool:
    """
    Delete an inventory item from the database.

    Args:
        items: Items collection
        item_id: ID of the inventory item to delete

    Returns:
        True if item was deleted, False if not found
    """
    result = items.delete_one({"_id": item_id})
    return result.deleted_count > 0
