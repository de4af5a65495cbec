"""
Inventory Sync Service

Multi-warehouse inventory reconciliation for the e-commerce platform.

Features:
- Warehouse registry with per-product, versioned stock records
- set/add/subtract/reserve/release updates with reservation invariants
- Propagation to every other active warehouse, last-write-wins on conflict
- Nearest-warehouse fulfillment selection (haversine distance)
- Sync health reporting and ERP/WMS snapshot ingestion
"""

__version__ = "1.0.0"
