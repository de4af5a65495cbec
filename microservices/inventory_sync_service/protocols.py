"""
Inventory Sync Service Protocols

Defines interfaces for dependency injection and testing.
Following the protocol-based architecture pattern.
"""

from datetime import datetime
from typing import Optional, Protocol, runtime_checkable

from .models import Location


# ====================
# Event Bus Protocol
# ====================


@runtime_checkable
class EventBusProtocol(Protocol):
    """Event bus interface for publishing events"""

    async def publish_event(self, event) -> bool:
        """
        Publish an event.

        Args:
            event: core.event_bus.Event envelope

        Returns:
            True if the event was accepted by the bus
        """
        ...


# ====================
# Collaborator Protocols
# ====================


@runtime_checkable
class ClockProtocol(Protocol):
    """Source of update and conflict timestamps"""

    def __call__(self) -> datetime:
        ...


@runtime_checkable
class DistanceCalculatorProtocol(Protocol):
    """Distance between two locations, in kilometres"""

    def __call__(self, origin: Location, destination: Location) -> float:
        ...


# ====================
# Custom Exceptions (no I/O operations)
# ====================


class InventorySyncError(Exception):
    """Base exception for inventory sync errors"""
    pass


class WarehouseNotFoundError(InventorySyncError):
    """Raised when an operation references an unregistered warehouse"""

    def __init__(self, warehouse_id: str):
        super().__init__(f"Warehouse {warehouse_id} not found")
        self.warehouse_id = warehouse_id


class DuplicateWarehouseError(InventorySyncError):
    """Raised when registering a warehouse ID that already exists"""

    def __init__(self, warehouse_id: str):
        super().__init__(f"Warehouse {warehouse_id} is already registered")
        self.warehouse_id = warehouse_id


class InsufficientInventoryError(InventorySyncError):
    """Raised when a reservation cannot be satisfied"""

    def __init__(
        self,
        message: str,
        warehouse_id: Optional[str] = None,
        product_id: Optional[str] = None,
        available: Optional[int] = None,
        required: Optional[int] = None,
    ):
        super().__init__(message)
        self.warehouse_id = warehouse_id
        self.product_id = product_id
        self.available = available
        self.required = required


class PropagationError(InventorySyncError):
    """Raised when an update could not be delivered to a target warehouse"""

    def __init__(self, message: str, warehouse_id: Optional[str] = None, reason: Optional[str] = None):
        super().__init__(message)
        self.warehouse_id = warehouse_id
        self.reason = reason


__all__ = [
    "EventBusProtocol",
    "ClockProtocol",
    "DistanceCalculatorProtocol",
    "InventorySyncError",
    "WarehouseNotFoundError",
    "DuplicateWarehouseError",
    "InsufficientInventoryError",
    "PropagationError",
]
