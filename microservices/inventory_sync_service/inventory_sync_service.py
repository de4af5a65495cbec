"""
Inventory Sync Service - Business Logic Layer

Multi-warehouse inventory reconciliation:
- Warehouse registration and status
- Versioned inventory updates (set/add/subtract/reserve/release)
- Propagation to the other warehouses with last-write-wins conflict resolution
- Global stock aggregation and sync health
- Fulfillment warehouse selection
"""

import asyncio
import logging
import uuid
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Optional, Set, Union

from core.config.sync_config import SyncConfig

from .conflict_resolver import ConflictResolver
from .fulfillment import FulfillmentSelector
from .models import (
    Conflict,
    ExternalInventoryItem,
    FulfillmentCandidate,
    GlobalInventory,
    InventoryOperation,
    InventoryUpdate,
    Location,
    PropagationResult,
    SyncStatus,
    Warehouse,
    WarehouseStatus,
    WarehouseSyncStatus,
)
from .protocols import ClockProtocol, DistanceCalculatorProtocol, EventBusProtocol
from .update_applier import UpdateApplier
from .warehouse_registry import WarehouseRegistry

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class InventorySyncService:
    """
    Inventory Sync Service - Core business logic

    One instance owns one set of warehouses. Construct it through
    create_inventory_sync_service() and hand it to collaborators.
    """

    def __init__(
        self,
        config: Optional[SyncConfig] = None,
        event_bus: Optional[EventBusProtocol] = None,
        clock: Optional[ClockProtocol] = None,
        distance: Optional[DistanceCalculatorProtocol] = None,
    ):
        """
        Initialize inventory sync service with dependencies.

        Args:
            config: Sync configuration (defaults when not provided)
            event_bus: Event bus for inventory events (optional)
            clock: Timestamp source (UTC now by default)
            distance: Distance function in km (haversine by default)
        """
        self.config = config or SyncConfig()
        self.event_bus = event_bus
        self._clock = clock or _utcnow

        self.registry = WarehouseRegistry(clock=self._clock)
        self.applier = UpdateApplier(self.registry, event_bus=event_bus)
        self.resolver = ConflictResolver(
            self.registry,
            self.applier,
            event_bus=event_bus,
            clock=self._clock,
            propagation_timeout=self.config.propagation_timeout_seconds,
        )
        self.selector = FulfillmentSelector(self.registry, distance=distance)

        self._sync_queue: List[InventoryUpdate] = []
        self._pending: Set[asyncio.Task] = set()

    # ====================
    # Warehouses
    # ====================

    def register_warehouse(self, warehouse_id: str, location: Union[Location, Dict[str, Any]]) -> Warehouse:
        """
        Register a warehouse node.

        Raises:
            ValueError: If warehouse_id is empty or padded with whitespace
            DuplicateWarehouseError: If warehouse_id already exists
        """
        if not isinstance(location, Location):
            location = Location.model_validate(location)
        return self.registry.register_warehouse(warehouse_id, location)

    def get_warehouse(self, warehouse_id: str) -> Warehouse:
        return self.registry.get_warehouse(warehouse_id)

    def set_warehouse_status(self, warehouse_id: str, status: Union[WarehouseStatus, str]) -> Warehouse:
        """Activate or deactivate a warehouse for propagation and fulfillment"""
        try:
            status = WarehouseStatus(status)
        except ValueError:
            raise ValueError(f"status must be one of: {[s.value for s in WarehouseStatus]}")
        return self.registry.set_warehouse_status(warehouse_id, status)

    # ====================
    # Inventory Updates
    # ====================

    async def update_inventory(
        self,
        warehouse_id: str,
        product_id: str,
        quantity: int,
        operation: Union[InventoryOperation, str] = InventoryOperation.SET,
    ) -> InventoryUpdate:
        """
        Apply an inventory mutation at its origin warehouse and propagate it.

        The update is versioned and applied while holding the origin's
        (warehouse, product) lock, so updates from one origin for one product
        carry strictly increasing versions in application order. Propagation
        failures and conflicts are not reported here; see get_sync_status().

        Quantities are non-negative: the operation gives the direction, so
        a decrease is a subtract or release, never a negative add or set.
        A negative value is rejected with ValueError before anything is
        applied or queued.

        Args:
            warehouse_id: Origin warehouse
            product_id: Product identifier
            quantity: Non-negative integer amount for the operation
            operation: set, add, subtract, reserve or release

        Returns:
            The applied InventoryUpdate

        Raises:
            ValueError: If the operation is unknown, product_id is empty, or
                quantity is not a non-negative integer
            WarehouseNotFoundError: If the warehouse is unknown
            InsufficientInventoryError: If a reserve cannot be satisfied
        """
        operation = self._coerce_operation(operation)
        self._validate_quantity(quantity)
        if not product_id:
            raise ValueError("product_id is required")

        self.registry.get_warehouse(warehouse_id)

        async with self.registry.lock_for(warehouse_id, product_id):
            update = InventoryUpdate(
                update_id=f"upd_{uuid.uuid4().hex[:16]}",
                warehouse_id=warehouse_id,
                product_id=product_id,
                quantity=quantity,
                operation=operation,
                timestamp=self._clock(),
                target_version=self.registry.get_version(warehouse_id, product_id) + 1,
            )
            record = await self.applier.apply(warehouse_id, update)
            self._sync_queue.append(update)

        await self.applier.announce(warehouse_id, update, record)

        if self.config.propagate_in_background:
            self._schedule_propagation(update)
        else:
            await self._propagate(update)

        return update

    async def reserve_inventory(self, warehouse_id: str, product_id: str, quantity: int) -> InventoryUpdate:
        """Hold stock for an in-flight order"""
        return await self.update_inventory(warehouse_id, product_id, quantity, InventoryOperation.RESERVE)

    async def release_inventory(self, warehouse_id: str, product_id: str, quantity: int) -> InventoryUpdate:
        """Give held stock back"""
        return await self.update_inventory(warehouse_id, product_id, quantity, InventoryOperation.RELEASE)

    async def commit_reservation(self, warehouse_id: str, product_id: str, quantity: int) -> None:
        """Turn a reservation into a permanent deduction (release, then subtract)"""
        await self.release_inventory(warehouse_id, product_id, quantity)
        await self.update_inventory(warehouse_id, product_id, quantity, InventoryOperation.SUBTRACT)

    async def sync_from_external_system(
        self,
        warehouse_id: str,
        items: Iterable[Union[ExternalInventoryItem, Dict[str, Any]]],
    ) -> List[InventoryUpdate]:
        """
        Overwrite stock levels from an ERP/WMS snapshot.

        Each line becomes a set update at the warehouse and is propagated
        like any other update.
        """
        self.registry.get_warehouse(warehouse_id)

        updates = []
        for item in items:
            if not isinstance(item, ExternalInventoryItem):
                item = ExternalInventoryItem.model_validate(item)
            update = await self.update_inventory(
                warehouse_id,
                item.product_id,
                item.quantity,
                InventoryOperation.SET,
            )
            updates.append(update)

        logger.info(f"Synced {len(updates)} items from external system to {warehouse_id}")
        return updates

    # ====================
    # Propagation
    # ====================

    async def _propagate(self, update: InventoryUpdate) -> List[PropagationResult]:
        results = await self.resolver.propagate(update)

        failed = [r.warehouse_id for r in results if not r.succeeded]
        conflicted = [r.warehouse_id for r in results if r.conflict_id]
        if failed or conflicted:
            logger.info(
                f"Propagated {update.update_id} to {len(results)} warehouses "
                f"(failed: {failed or 'none'}, conflicts: {conflicted or 'none'})"
            )
        return results

    def _schedule_propagation(self, update: InventoryUpdate) -> None:
        task = asyncio.create_task(self._propagate(update))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    async def flush(self) -> None:
        """Wait for background propagation to finish"""
        while self._pending:
            await asyncio.gather(*list(self._pending))

    # ====================
    # Queries
    # ====================

    def get_global_inventory(self, product_id: str) -> GlobalInventory:
        return self.registry.get_global_inventory(product_id)

    def find_optimal_warehouse(
        self,
        product_id: str,
        quantity: int,
        destination: Union[Location, Dict[str, Any]],
    ) -> Optional[FulfillmentCandidate]:
        """Nearest active warehouse with enough available stock, or None"""
        self._validate_quantity(quantity)
        if not isinstance(destination, Location):
            destination = Location.model_validate(destination)
        return self.selector.find_optimal_warehouse(product_id, quantity, destination)

    def get_conflicts(self) -> List[Conflict]:
        return self.resolver.conflicts

    @property
    def sync_queue(self) -> List[InventoryUpdate]:
        """Every update accepted at an origin, in arrival order"""
        return list(self._sync_queue)

    def get_sync_status(self) -> SyncStatus:
        """Sync health per warehouse and overall"""
        rows = []
        total_lag = 0
        for warehouse in self.registry.list_warehouses():
            total_lag += warehouse.lag
            rows.append(WarehouseSyncStatus(
                warehouse_id=warehouse.warehouse_id,
                location=warehouse.location,
                status=warehouse.status,
                item_count=len(warehouse.inventory),
                last_sync=warehouse.last_sync,
                lag=warehouse.lag,
                healthy=warehouse.lag < self.config.warehouse_lag_threshold,
            ))

        conflicts = self.resolver.conflicts
        avg_lag = total_lag / len(rows) if rows else 0.0

        return SyncStatus(
            warehouses=rows,
            total_warehouses=len(rows),
            active_warehouses=sum(1 for r in rows if r.status == WarehouseStatus.ACTIVE),
            queue_length=len(self._sync_queue),
            conflicts=len(conflicts),
            unresolved_conflicts=sum(1 for c in conflicts if not c.resolved),
            avg_lag=avg_lag,
            healthy=avg_lag < self.config.avg_lag_threshold,
        )

    # ====================
    # Validation
    # ====================

    @staticmethod
    def _coerce_operation(operation: Union[InventoryOperation, str]) -> InventoryOperation:
        try:
            return InventoryOperation(operation)
        except ValueError:
            raise ValueError(
                f"operation must be one of: {[op.value for op in InventoryOperation]}"
            )

    @staticmethod
    def _validate_quantity(quantity: int) -> None:
        if isinstance(quantity, bool) or not isinstance(quantity, int):
            raise ValueError("quantity must be an integer")
        if quantity < 0:
            raise ValueError("quantity must be non-negative")
