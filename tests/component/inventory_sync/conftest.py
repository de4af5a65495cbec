"""
Inventory Sync Service Component Test Fixtures

Provides a fully wired InventorySyncService backed by:
- MockEventBus: records inventory:updated / inventory:conflict events
- FakeClock: strictly increasing timestamps
"""

import pytest

from core.config.sync_config import SyncConfig
from microservices.inventory_sync_service.inventory_sync_service import InventorySyncService
from tests.component.mocks import MockEventBus


@pytest.fixture
def mock_event_bus() -> MockEventBus:
    """Mock event bus"""
    return MockEventBus()


@pytest.fixture
def sync_config() -> SyncConfig:
    """Propagation awaited by the caller"""
    return SyncConfig(propagation_timeout_seconds=1.0)


@pytest.fixture
def sync_service(sync_config, mock_event_bus, clock) -> InventorySyncService:
    """InventorySyncService with awaited propagation"""
    return InventorySyncService(config=sync_config, event_bus=mock_event_bus, clock=clock)


@pytest.fixture
def background_service(mock_event_bus, clock) -> InventorySyncService:
    """InventorySyncService that propagates in the background"""
    config = SyncConfig(propagation_timeout_seconds=1.0, propagate_in_background=True)
    return InventorySyncService(config=config, event_bus=mock_event_bus, clock=clock)


@pytest.fixture
def two_warehouses(sync_service, data_factory):
    """Warehouses A (New York) and B (Chicago)"""
    sync_service.register_warehouse("A", data_factory.make_location("new_york"))
    sync_service.register_warehouse("B", data_factory.make_location("chicago"))
    return sync_service
