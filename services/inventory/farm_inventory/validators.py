"""
Validation utilities for the Farm Inventory service.

Runs before any store call, on top of the type checks done by the schemas.
"""
from enum import Enum
from typing import Any, Dict, Optional

from bson import ObjectId

from . import schemas


class ItemValidationError(str, Enum):
    """Validation failures, valued by the message returned to the client."""
    NAME_REQUIRED = "Item name is required"
    NAME_EMPTY = "Item name cannot be empty"
    INVALID_ID = "Invalid item ID format"
    NULL_FIELD = "quantity, vehicles and lowStockThreshold cannot be null"


# Stored fields that always hold a value once an item exists
NON_NULLABLE_FIELDS = ("quantity", "vehicles", "lowStockThreshold")


def validate_new_item(item: schemas.InventoryItemCreate) -> Optional[ItemValidationError]:
    """
    Validate an item about to be created.

    Args:
        item: Parsed create request

    Returns:
        None if the item is valid, otherwise the reason it was rejected
    """
    if item.name is None or not item.name.strip():
        return ItemValidationError.NAME_REQUIRED
    return None


def validate_item_update(changes: Dict[str, Any]) -> Optional[ItemValidationError]:
    """
    Validate the fields supplied in an update request.

    Only supplied fields are checked; a name may be left out but not blanked,
    and the other stored fields may be left out but not nulled.
    """
    if "name" in changes and (changes["name"] is None or not changes["name"].strip()):
        return ItemValidationError.NAME_EMPTY
    if any(field in changes and changes[field] is None for field in NON_NULLABLE_FIELDS):
        return ItemValidationError.NULL_FIELD
    return None


def parse_item_id(raw: str) -> Optional[ObjectId]:
    """Return the ObjectId for a path identifier, or None if it is malformed."""
    if not ObjectId.is_valid(raw):
        return None
    return ObjectId(raw)
