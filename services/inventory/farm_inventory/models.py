"""
MongoDB document layout for the Farm Inventory service.

Items live in a single collection. Field names are stored in camelCase:

    _id (ObjectId): Identifier assigned by MongoDB on insert
    name (str): Item name, required
    category (str): Optional category such as "Filters" or "Belts"
    quantity (int): Units in stock, defaults to 0
    vehicles (list of str): Vehicles the item fits, defaults to []
    lowStockThreshold (int): Stock level at or below which the item is low, defaults to 5
    createdAt (datetime): Set on insert
    updatedAt (datetime): Set on insert and refreshed on every update
"""

DEFAULT_DATABASE = "farm-inventory"
ITEMS_COLLECTION = "inventories"

DEFAULT_QUANTITY = 0
DEFAULT_LOW_STOCK_THRESHOLD = 5

# Items whose quantity is at or below their own threshold
LOW_STOCK_FILTER = {"$expr": {"$lte": ["$quantity", "$lowStockThreshold"]}}

