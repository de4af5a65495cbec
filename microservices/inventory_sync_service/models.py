"""
Inventory Sync Service Data Models

Multi-warehouse stock state, versioned inventory updates and the
conflict records produced when updates collide during propagation.
"""

from datetime import datetime
from enum import Enum
from typing import Optional, Dict, List
from pydantic import BaseModel, ConfigDict, Field, computed_field


class WarehouseStatus(str, Enum):
    """Warehouse status"""
    ACTIVE = "active"
    INACTIVE = "inactive"


class InventoryOperation(str, Enum):
    """Inventory mutation kind"""
    SET = "set"
    ADD = "add"
    SUBTRACT = "subtract"
    RESERVE = "reserve"
    RELEASE = "release"


class ConflictResolution(str, Enum):
    """Outcome of last-write-wins conflict resolution"""
    ACCEPTED_INCOMING = "accepted_incoming"
    KEPT_CURRENT = "kept_current"


class Location(BaseModel):
    """Geographic location of a warehouse or shipping destination"""
    latitude: float = Field(..., ge=-90, le=90)
    longitude: float = Field(..., ge=-180, le=180)
    label: Optional[str] = None

    def __str__(self) -> str:
        if self.label:
            return self.label
        return f"{self.latitude:.4f},{self.longitude:.4f}"


class InventoryRecord(BaseModel):
    """Stock state of one product at one warehouse"""
    quantity: int = 0
    reserved: int = 0
    version: int = 0
    last_updated: Optional[datetime] = None

    @computed_field
    @property
    def available(self) -> int:
        return self.quantity - self.reserved


class Warehouse(BaseModel):
    """A stock location and everything it currently believes about its inventory"""
    warehouse_id: str
    location: Location
    inventory: Dict[str, InventoryRecord] = Field(default_factory=dict)
    status: WarehouseStatus = WarehouseStatus.ACTIVE
    last_sync: Optional[datetime] = None
    lag: int = 0
    registered_at: Optional[datetime] = None

    @property
    def is_active(self) -> bool:
        return self.status == WarehouseStatus.ACTIVE


class InventoryUpdate(BaseModel):
    """Immutable record of one mutation intent"""
    model_config = ConfigDict(frozen=True)

    update_id: str
    warehouse_id: str
    product_id: str
    quantity: int
    operation: InventoryOperation
    timestamp: datetime
    target_version: int = Field(..., ge=1)


class Conflict(BaseModel):
    """Stale-version collision detected at a non-origin warehouse"""
    conflict_id: str
    warehouse_id: str
    product_id: str
    incoming_update: InventoryUpdate
    current_state: InventoryRecord
    detected_at: datetime
    resolved: bool = False
    resolution: Optional[ConflictResolution] = None


class PropagationResult(BaseModel):
    """Settled outcome of propagating one update to one target warehouse"""
    warehouse_id: str
    update_id: str
    applied: bool = False
    conflict_id: Optional[str] = None
    resolution: Optional[ConflictResolution] = None
    error: Optional[str] = None

    @property
    def succeeded(self) -> bool:
        return self.error is None


# ====================
# Read Models
# ====================

class WarehouseInventory(BaseModel):
    """Per-warehouse row of a global inventory breakdown"""
    warehouse_id: str
    location: Location
    quantity: int
    reserved: int
    available: int


class GlobalInventory(BaseModel):
    """Inventory of one product aggregated across warehouses"""
    product_id: str
    total_quantity: int = 0
    total_reserved: int = 0
    total_available: int = 0
    warehouses: List[WarehouseInventory] = Field(default_factory=list)


class FulfillmentCandidate(BaseModel):
    """A warehouse able to serve an order line"""
    warehouse_id: str
    location: Location
    available: int
    distance_km: float
    estimated_shipping: str


class ExternalInventoryItem(BaseModel):
    """One line of an ERP/WMS stock snapshot"""
    product_id: str
    quantity: int = Field(..., ge=0)


class WarehouseSyncStatus(BaseModel):
    """Sync health of a single warehouse"""
    warehouse_id: str
    location: Location
    status: WarehouseStatus
    item_count: int
    last_sync: Optional[datetime] = None
    lag: int
    healthy: bool


class SyncStatus(BaseModel):
    """Sync health across all warehouses"""
    warehouses: List[WarehouseSyncStatus] = Field(default_factory=list)
    total_warehouses: int = 0
    active_warehouses: int = 0
    queue_length: int = 0
    conflicts: int = 0
    unresolved_conflicts: int = 0
    avg_lag: float = 0.0
    healthy: bool = True
