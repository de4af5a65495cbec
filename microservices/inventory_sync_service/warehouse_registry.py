"""
Warehouse Registry

Holds the known warehouse nodes and the per-product inventory each of them
currently believes in. The registry is the only owner of that state; the
update applier mutates records through it and every reader goes through it.
"""

import asyncio
import logging
from datetime import datetime, timezone
from typing import Dict, List, Optional, Tuple

from .models import (
    GlobalInventory,
    InventoryRecord,
    Location,
    Warehouse,
    WarehouseInventory,
    WarehouseStatus,
)
from .protocols import ClockProtocol, DuplicateWarehouseError, WarehouseNotFoundError

logger = logging.getLogger(__name__)


class WarehouseRegistry:
    """
    Registry of warehouses and their inventory records.

    Mutations of one (warehouse, product) pair are serialized by the lock
    returned from lock_for(); there is no registry-wide lock.
    """

    def __init__(self, clock: Optional[ClockProtocol] = None):
        self._warehouses: Dict[str, Warehouse] = {}
        self._locks: Dict[Tuple[str, str], asyncio.Lock] = {}
        self._clock = clock or (lambda: datetime.now(timezone.utc))

    # ====================
    # Registration
    # ====================

    def register_warehouse(self, warehouse_id: str, location: Location) -> Warehouse:
        """
        Register a warehouse node.

        Raises:
            ValueError: If warehouse_id is empty or padded with whitespace
            DuplicateWarehouseError: If warehouse_id is already registered
        """
        if not warehouse_id or not warehouse_id.strip():
            raise ValueError("warehouse_id is required")
        if warehouse_id != warehouse_id.strip():
            raise ValueError("warehouse_id must not have leading or trailing whitespace")

        if warehouse_id in self._warehouses:
            raise DuplicateWarehouseError(warehouse_id)

        warehouse = Warehouse(
            warehouse_id=warehouse_id,
            location=location,
            registered_at=self._clock(),
        )
        self._warehouses[warehouse_id] = warehouse

        logger.info(f"Registered warehouse: {warehouse_id} ({location})")
        return warehouse

    def get_warehouse(self, warehouse_id: str) -> Warehouse:
        warehouse = self._warehouses.get(warehouse_id)
        if warehouse is None:
            raise WarehouseNotFoundError(warehouse_id)
        return warehouse

    def has_warehouse(self, warehouse_id: str) -> bool:
        return warehouse_id in self._warehouses

    def list_warehouses(self) -> List[Warehouse]:
        return list(self._warehouses.values())

    def active_targets(self, excluding: str) -> List[Warehouse]:
        """Active warehouses other than the given one"""
        return [
            warehouse
            for warehouse_id, warehouse in self._warehouses.items()
            if warehouse_id != excluding and warehouse.is_active
        ]

    def set_warehouse_status(self, warehouse_id: str, status: WarehouseStatus) -> Warehouse:
        warehouse = self.get_warehouse(warehouse_id)
        if warehouse.status != status:
            warehouse.status = status
            logger.info(f"Warehouse {warehouse_id} is now {status.value}")
        return warehouse

    # ====================
    # Records
    # ====================

    def get_record(self, warehouse_id: str, product_id: str) -> Optional[InventoryRecord]:
        return self.get_warehouse(warehouse_id).inventory.get(product_id)

    def get_version(self, warehouse_id: str, product_id: str) -> int:
        record = self.get_record(warehouse_id, product_id)
        return record.version if record else 0

    def store_record(self, warehouse_id: str, product_id: str, record: InventoryRecord) -> None:
        self.get_warehouse(warehouse_id).inventory[product_id] = record

    def lock_for(self, warehouse_id: str, product_id: str) -> asyncio.Lock:
        """Lock serializing mutations of one (warehouse, product) pair"""
        key = (warehouse_id, product_id)
        lock = self._locks.get(key)
        if lock is None:
            lock = asyncio.Lock()
            self._locks[key] = lock
        return lock

    # ====================
    # Aggregation
    # ====================

    def get_global_inventory(self, product_id: str) -> GlobalInventory:
        """
        Aggregate a product's stock across warehouses.

        Warehouses without a record for the product are left out of the
        breakdown rather than counted as zero.
        """
        total_quantity = 0
        total_reserved = 0
        rows: List[WarehouseInventory] = []

        for warehouse_id, warehouse in self._warehouses.items():
            record = warehouse.inventory.get(product_id)
            if record is None:
                continue

            total_quantity += record.quantity
            total_reserved += record.reserved
            rows.append(WarehouseInventory(
                warehouse_id=warehouse_id,
                location=warehouse.location,
                quantity=record.quantity,
                reserved=record.reserved,
                available=record.available,
            ))

        return GlobalInventory(
            product_id=product_id,
            total_quantity=total_quantity,
            total_reserved=total_reserved,
            total_available=total_quantity - total_reserved,
            warehouses=rows,
        )

    def __len__(self) -> int:
        return len(self._warehouses)
