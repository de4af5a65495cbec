"""
Inventory Sync Service Event Publishers

Functions to publish events from inventory sync service
"""

import logging
from typing import Optional, Dict, Any

from core.event_bus import Event
from ..models import Conflict, InventoryRecord, InventoryUpdate
from .models import (
    InventorySyncEventType,
    InventoryUpdatedEvent,
    InventoryConflictEvent,
)

logger = logging.getLogger(__name__)

SERVICE_SOURCE = "inventory_sync_service"


async def publish_inventory_updated(
    event_bus,
    warehouse_id: str,
    update: InventoryUpdate,
    record: InventoryRecord,
    metadata: Optional[Dict[str, Any]] = None
) -> bool:
    """Publish inventory:updated event"""
    if not event_bus:
        logger.debug("Event bus not available, skipping inventory:updated event")
        return False

    try:
        event_data = InventoryUpdatedEvent(
            warehouse_id=warehouse_id,
            update=update,
            record=record,
            metadata=metadata or {}
        )

        event = Event(
            event_type=InventorySyncEventType.INVENTORY_UPDATED,
            source=SERVICE_SOURCE,
            data=event_data.model_dump(mode='json')
        )

        await event_bus.publish_event(event)
        logger.debug(f"Published inventory:updated event for {update.product_id} at {warehouse_id}")
        return True

    except Exception as e:
        logger.error(f"Failed to publish inventory:updated event: {e}")
        return False


async def publish_inventory_conflict(
    event_bus,
    conflict: Conflict,
    metadata: Optional[Dict[str, Any]] = None
) -> bool:
    """Publish inventory:conflict event"""
    if not event_bus:
        logger.debug("Event bus not available, skipping inventory:conflict event")
        return False

    try:
        event_data = InventoryConflictEvent(
            conflict=conflict,
            metadata=metadata or {}
        )

        event = Event(
            event_type=InventorySyncEventType.INVENTORY_CONFLICT,
            source=SERVICE_SOURCE,
            data=event_data.model_dump(mode='json')
        )

        await event_bus.publish_event(event)
        logger.info(f"Published inventory:conflict event {conflict.conflict_id}")
        return True

    except Exception as e:
        logger.error(f"Failed to publish inventory:conflict event: {e}")
        return False
