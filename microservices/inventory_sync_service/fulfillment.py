"""
Fulfillment Selector

Picks the warehouse that should ship an order line: among active warehouses
with enough available stock, the one nearest to the destination.
"""

import math
from typing import List, Optional

from .models import FulfillmentCandidate, Location
from .protocols import DistanceCalculatorProtocol
from .warehouse_registry import WarehouseRegistry

EARTH_RADIUS_KM = 6371.0


def haversine_distance_km(origin: Location, destination: Location) -> float:
    """Calculate distance between two points using Haversine formula (in kilometres)"""
    lat1_rad = math.radians(origin.latitude)
    lat2_rad = math.radians(destination.latitude)
    delta_lat = math.radians(destination.latitude - origin.latitude)
    delta_lon = math.radians(destination.longitude - origin.longitude)

    a = (math.sin(delta_lat / 2) ** 2 +
         math.cos(lat1_rad) * math.cos(lat2_rad) *
         math.sin(delta_lon / 2) ** 2)
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))

    return EARTH_RADIUS_KM * c


def estimate_shipping(distance_km: float) -> str:
    """Rough delivery window for a shipping distance"""
    if distance_km < 100:
        return "1-2 days"
    if distance_km < 500:
        return "2-3 days"
    if distance_km < 1000:
        return "3-5 days"
    return "5-7 days"


class FulfillmentSelector:
    """Read-only view over the registry for order routing"""

    def __init__(
        self,
        registry: WarehouseRegistry,
        distance: Optional[DistanceCalculatorProtocol] = None,
    ):
        self.registry = registry
        self.distance = distance or haversine_distance_km

    def rank_warehouses(self, product_id: str, quantity: int, destination: Location) -> List[FulfillmentCandidate]:
        """
        All warehouses able to serve the line, best first.

        Ordered by distance, then larger available stock, then warehouse ID.
        """
        candidates = []
        for warehouse in self.registry.list_warehouses():
            if not warehouse.is_active:
                continue

            record = warehouse.inventory.get(product_id)
            if record is None or record.available < quantity:
                continue

            distance_km = self.distance(warehouse.location, destination)
            candidates.append(FulfillmentCandidate(
                warehouse_id=warehouse.warehouse_id,
                location=warehouse.location,
                available=record.available,
                distance_km=distance_km,
                estimated_shipping=estimate_shipping(distance_km),
            ))

        candidates.sort(key=lambda c: (c.distance_km, -c.available, c.warehouse_id))
        return candidates

    def find_optimal_warehouse(
        self,
        product_id: str,
        quantity: int,
        destination: Location,
    ) -> Optional[FulfillmentCandidate]:
        """Nearest warehouse with enough available stock, or None"""
        candidates = self.rank_warehouses(product_id, quantity, destination)
        return candidates[0] if candidates else None
