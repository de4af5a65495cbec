"""
Inventory Sync Service Factory

Factory for creating InventorySyncService with real dependencies.
This is the ONLY module that imports concrete implementations.
"""

import logging
from typing import Optional

from core.config.sync_config import SyncConfig
from core.event_bus import get_event_bus
from core.logger import setup_service_logger

from .events.handlers import get_event_handlers
from .inventory_sync_service import InventorySyncService

logger = logging.getLogger(__name__)


async def create_inventory_sync_service(
    config: Optional[SyncConfig] = None,
    event_bus=None,
    subscribe_handlers: bool = True,
    **kwargs,
) -> InventorySyncService:
    """
    Create InventorySyncService with all real dependencies

    Args:
        config: Optional sync config (loaded from environment if not provided)
        event_bus: Optional event bus (a local bus is created if not provided)
        subscribe_handlers: Register the service's event handlers on the bus
        **kwargs: Passed through to InventorySyncService (clock, distance)

    Returns:
        Fully initialized InventorySyncService instance
    """
    if config is None:
        config = SyncConfig.from_env()

    setup_service_logger(__package__, level=config.log_level, config=config.logging)

    if event_bus is None:
        event_bus = await get_event_bus("inventory_sync_service")

    service = InventorySyncService(config=config, event_bus=event_bus, **kwargs)

    if subscribe_handlers:
        handler_map = get_event_handlers(service)
        for event_pattern, handler_func in handler_map.items():
            await event_bus.subscribe_to_events(pattern=event_pattern, handler=handler_func)
            logger.info(f"Subscribed to {event_pattern} events")

    logger.info("InventorySyncService created")
    return service


__all__ = ["create_inventory_sync_service"]
