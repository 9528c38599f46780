"""
Pydantic schemas for request/response validation in the Farm Inventory service.

These schemas define the structure of data for API requests and responses.
Fields use snake_case in Python and camelCase on the wire.
"""
from datetime import datetime
from typing import Any, Dict, List, Optional

from bson import ObjectId
from pydantic import BaseModel, Field, field_validator

from . import models


class InventoryItemBase(BaseModel):
    """Base schema with common inventory item attributes."""
    name: Optional[str] = None
    category: Optional[str] = None

    class Config:
        populate_by_name = True


class InventoryItemCreate(InventoryItemBase):
    """Schema for creating a new inventory item. Name presence is checked by validators."""
    quantity: int = models.DEFAULT_QUANTITY
    vehicles: List[str] = Field(default_factory=list)
    low_stock_threshold: int = Field(models.DEFAULT_LOW_STOCK_THRESHOLD, alias="lowStockThreshold")

    def to_document(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)


class InventoryItemUpdate(InventoryItemBase):
    """Schema for updating an existing inventory item. All fields are optional."""
    quantity: Optional[int] = None
    vehicles: Optional[List[str]] = None
    low_stock_threshold: Optional[int] = Field(None, alias="lowStockThreshold")

    def changes(self) -> Dict[str, Any]:
        """Fields supplied by the client, keyed by their stored names."""
        return self.model_dump(by_alias=True, exclude_unset=True)


class InventoryItem(BaseModel):
    """
    Schema for inventory item responses, includes all stored fields.

    Attributes:
        id (str): Item's unique identifier, serialized as "_id"
        name (str): Item name
        category (str): Optional category
        quantity (int): Units in stock
        vehicles (list): Compatible vehicle names
        low_stock_threshold (int): Low-stock level, serialized as "lowStockThreshold"
        created_at (datetime): When the item was created
        updated_at (datetime): When the item was last changed
    """
    id: str = Field(alias="_id")
    name: str
    category: Optional[str] = None
    quantity: int = models.DEFAULT_QUANTITY
    vehicles: List[str] = Field(default_factory=list)
    low_stock_threshold: int = Field(models.DEFAULT_LOW_STOCK_THRESHOLD, alias="lowStockThreshold")
    created_at: Optional[datetime] = Field(None, alias="createdAt")
    updated_at: Optional[datetime] = Field(None, alias="updatedAt")

    class Config:
        populate_by_name = True

    @field_validator("id", mode="before")
    @classmethod
    def stringify_object_id(cls, value):
        if isinstance(value, ObjectId):
            return str(value)
        return value


class Message(BaseModel):
    message: str
