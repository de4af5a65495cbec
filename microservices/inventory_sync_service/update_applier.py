"""
Update Applier

Applies one InventoryUpdate to one warehouse's InventoryRecord.
"""

import logging
from typing import Optional

from .events.publishers import publish_inventory_updated
from .models import InventoryOperation, InventoryRecord, InventoryUpdate
from .protocols import EventBusProtocol, InsufficientInventoryError
from .warehouse_registry import WarehouseRegistry

logger = logging.getLogger(__name__)


def apply_operation(current: InventoryRecord, update: InventoryUpdate) -> InventoryRecord:
    """
    Compute the record that results from applying an update.

    The current record is never modified. Version and timestamp are left
    as they were; the caller stamps them once the new record is accepted.

    Operation semantics:
        set       quantity := value (not clamped)
        add       quantity += value
        subtract  quantity := max(0, quantity - value)
        reserve   reserved += value, only if available >= value
        release   reserved := max(0, reserved - value)

    Raises:
        InsufficientInventoryError: If a reserve exceeds available stock
    """
    quantity = current.quantity
    reserved = current.reserved
    operation = update.operation

    if operation == InventoryOperation.SET:
        quantity = update.quantity
    elif operation == InventoryOperation.ADD:
        quantity += update.quantity
    elif operation == InventoryOperation.SUBTRACT:
        quantity = max(0, quantity - update.quantity)
    elif operation == InventoryOperation.RESERVE:
        available = quantity - reserved
        if available < update.quantity:
            raise InsufficientInventoryError(
                f"Insufficient inventory to reserve {update.quantity} of {update.product_id} "
                f"(available {available})",
                product_id=update.product_id,
                available=available,
                required=update.quantity,
            )
        reserved += update.quantity
    elif operation == InventoryOperation.RELEASE:
        reserved = max(0, reserved - update.quantity)
    else:
        raise ValueError(f"Unsupported inventory operation: {operation}")

    # Reservations cannot outlive the stock they hold
    if reserved > quantity:
        trimmed = max(0, quantity)
        logger.warning(
            f"{update.operation.value} of {update.product_id} left reserved={reserved} above "
            f"quantity={quantity}; trimming reservations to {trimmed}"
        )
        reserved = trimmed

    return current.model_copy(update={"quantity": quantity, "reserved": reserved})


class UpdateApplier:
    """
    Commits updates to warehouse records and announces them.

    Callers must hold registry.lock_for(warehouse_id, product_id) around
    apply() so the read-decide-write sequence is atomic per pair, and call
    announce() once the lock is released so subscribers may mutate the
    same pair.
    """

    def __init__(self, registry: WarehouseRegistry, event_bus: Optional[EventBusProtocol] = None):
        self.registry = registry
        self.event_bus = event_bus

    async def apply(
        self,
        warehouse_id: str,
        update: InventoryUpdate,
        version: Optional[int] = None,
    ) -> InventoryRecord:
        """
        Apply an update at a warehouse.

        Args:
            warehouse_id: Warehouse to mutate (origin or propagation target)
            update: The update to apply
            version: Version to stamp; defaults to update.target_version

        Returns:
            The committed record

        Raises:
            WarehouseNotFoundError: If the warehouse is unknown
            InsufficientInventoryError: If a reserve cannot be satisfied
        """
        current = self.registry.get_record(warehouse_id, update.product_id) or InventoryRecord()

        try:
            record = apply_operation(current, update)
        except InsufficientInventoryError as e:
            e.warehouse_id = warehouse_id
            raise

        record.version = update.target_version if version is None else version
        record.last_updated = update.timestamp
        self.registry.store_record(warehouse_id, update.product_id, record)

        logger.info(f"{warehouse_id}: {update.product_id} = {record.quantity} (v{record.version})")
        return record

    async def announce(self, warehouse_id: str, update: InventoryUpdate, record: InventoryRecord) -> bool:
        """Emit inventory:updated for an applied update"""
        return await publish_inventory_updated(
            self.event_bus,
            warehouse_id=warehouse_id,
            update=update,
            record=record,
        )
