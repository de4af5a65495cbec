"""
Root conftest.py - Global fixtures and configuration for all test layers.

Test Layers:
    - component/  : Component tests (service with mocked event bus)
    - unit/       : Unit tests (pure functions, no I/O)
"""
import os
import sys

import pytest

# Set testing environment BEFORE any project imports
os.environ.setdefault("ENV", "testing")

# Add project root to path
PROJECT_ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
sys.path.insert(0, PROJECT_ROOT)

from tests.contracts.inventory_sync.data_contract import (
    FakeClock,
    InventorySyncTestDataFactory,
)


# =============================================================================
# Pytest Configuration
# =============================================================================

def pytest_configure(config):
    """Configure custom markers"""
    config.addinivalue_line(
        "markers", "unit: marks tests as unit tests (pure logic, no I/O)"
    )
    config.addinivalue_line(
        "markers", "component: marks tests as component tests"
    )


# =============================================================================
# Shared Fixtures
# =============================================================================

@pytest.fixture
def data_factory() -> InventorySyncTestDataFactory:
    """Test data factory"""
    return InventorySyncTestDataFactory()


@pytest.fixture
def clock() -> FakeClock:
    """Deterministic, strictly increasing clock"""
    return FakeClock()
