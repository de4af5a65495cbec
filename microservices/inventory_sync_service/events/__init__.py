"""
Inventory Sync Service Events Module

Exports all event-related functionality for inventory sync service
"""

from .models import (
    InventorySyncEventType,
    InventorySyncSubscribedEventType,
    InventoryUpdatedEvent,
    InventoryConflictEvent,
    InventorySnapshotEvent,
    SnapshotItem,
)

from .publishers import (
    publish_inventory_updated,
    publish_inventory_conflict,
)

from .handlers import get_event_handlers

__all__ = [
    # Event Types
    "InventorySyncEventType",
    "InventorySyncSubscribedEventType",
    # Event Models
    "InventoryUpdatedEvent",
    "InventoryConflictEvent",
    "InventorySnapshotEvent",
    "SnapshotItem",
    # Publishers
    "publish_inventory_updated",
    "publish_inventory_conflict",
    # Handlers
    "get_event_handlers",
]
