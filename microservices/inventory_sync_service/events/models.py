"""
Inventory Sync Service Event Models

Pydantic models for events published by inventory sync service
"""

from pydantic import BaseModel, Field
from enum import Enum
from typing import Optional, Dict, Any, List
from datetime import datetime, timezone

from ..models import Conflict, InventoryRecord, InventoryUpdate


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


# =============================================================================
# Event Type Definitions (Service-Specific)
# =============================================================================

class InventorySyncEventType(str, Enum):
    """
    Events published by inventory_sync_service.

    Subjects: inventory:*
    """
    INVENTORY_UPDATED = "inventory:updated"
    INVENTORY_CONFLICT = "inventory:conflict"


class InventorySyncSubscribedEventType(str, Enum):
    """Events that inventory_sync_service subscribes to from other systems."""
    ERP_INVENTORY_SNAPSHOT = "erp.inventory.snapshot"


# =============================================================================
# Event Data Models
# =============================================================================

class InventoryUpdatedEvent(BaseModel):
    """Event published each time an update is applied at a warehouse"""
    warehouse_id: str
    update: InventoryUpdate
    record: InventoryRecord
    metadata: Optional[Dict[str, Any]] = None
    timestamp: datetime = Field(default_factory=_utcnow)


class InventoryConflictEvent(BaseModel):
    """Event published when a version conflict is detected and resolved"""
    conflict: Conflict
    metadata: Optional[Dict[str, Any]] = None
    timestamp: datetime = Field(default_factory=_utcnow)


class SnapshotItem(BaseModel):
    """Stock line received from an external system"""
    product_id: str
    quantity: int = Field(..., ge=0)


class InventorySnapshotEvent(BaseModel):
    """Stock snapshot pushed by an ERP/WMS for one warehouse"""
    warehouse_id: str
    items: List[SnapshotItem]
    source_system: Optional[str] = None
