"""
Inventory Sync Service Event Handlers

Handlers for stock snapshots pushed by external systems (ERP, WMS)
"""

import logging
from typing import Dict, Any, Callable

from pydantic import ValidationError

from ..models import ExternalInventoryItem
from ..protocols import InventorySyncError
from .models import InventorySnapshotEvent, InventorySyncSubscribedEventType

logger = logging.getLogger(__name__)


async def handle_inventory_snapshot(
    event_data: Dict[str, Any],
    sync_service
) -> None:
    """
    Handle erp.inventory.snapshot event

    Overwrite the warehouse's stock levels with the snapshot quantities
    """
    try:
        snapshot = InventorySnapshotEvent.model_validate(event_data)
    except ValidationError as e:
        logger.warning(f"erp.inventory.snapshot event rejected: {e}")
        return

    logger.info(
        f"Processing inventory snapshot for {snapshot.warehouse_id} "
        f"({len(snapshot.items)} items, source={snapshot.source_system or 'unknown'})"
    )

    try:
        items = [
            ExternalInventoryItem(product_id=item.product_id, quantity=item.quantity)
            for item in snapshot.items
        ]
        await sync_service.sync_from_external_system(snapshot.warehouse_id, items)
    except InventorySyncError as e:
        logger.error(f"Error handling inventory snapshot for {snapshot.warehouse_id}: {e}")


def get_event_handlers(sync_service) -> Dict[str, Callable]:
    """
    Return a mapping of event patterns to handler functions

    Args:
        sync_service: InventorySyncService instance

    Returns:
        Dict mapping event patterns to handler functions
    """
    return {
        InventorySyncSubscribedEventType.ERP_INVENTORY_SNAPSHOT.value: lambda event: handle_inventory_snapshot(
            event.data, sync_service
        ),
    }
