"""
Conflict Resolver & Propagator

Fans an update that was applied at its origin warehouse out to every other
active warehouse. A target whose record is already at or past the update's
target version has seen a concurrent update; the collision is recorded as a
Conflict and resolved on the spot by last-write-wins on the update timestamp.

Delivery to each target is independent: a failing or slow target gets its
lag counter bumped and never blocks, fails or rolls back delivery to the
others. The timeout covers committing at the target, not the events
published afterwards. Nothing is retried here.
"""

import asyncio
import logging
import uuid
from datetime import datetime, timezone
from typing import List, Optional, Tuple

from .events.publishers import publish_inventory_conflict
from .models import (
    Conflict,
    ConflictResolution,
    InventoryRecord,
    InventoryUpdate,
    PropagationResult,
    Warehouse,
)
from .protocols import (
    ClockProtocol,
    EventBusProtocol,
    InsufficientInventoryError,
    PropagationError,
)
from .update_applier import UpdateApplier
from .warehouse_registry import WarehouseRegistry

logger = logging.getLogger(__name__)


class ConflictResolver:
    """Propagates updates between warehouses and keeps the conflict log"""

    def __init__(
        self,
        registry: WarehouseRegistry,
        applier: UpdateApplier,
        event_bus: Optional[EventBusProtocol] = None,
        clock: Optional[ClockProtocol] = None,
        propagation_timeout: Optional[float] = 5.0,
    ):
        """
        Args:
            registry: Warehouse registry
            applier: Update applier used at target warehouses
            event_bus: Event bus for inventory:conflict events (optional)
            clock: Timestamp source for conflict detection
            propagation_timeout: Seconds allowed per target; None disables the bound
        """
        self.registry = registry
        self.applier = applier
        self.event_bus = event_bus
        self.propagation_timeout = propagation_timeout
        self._clock = clock or (lambda: datetime.now(timezone.utc))
        self._conflicts: List[Conflict] = []

    @property
    def conflicts(self) -> List[Conflict]:
        """Conflict log, oldest first"""
        return list(self._conflicts)

    # ====================
    # Propagation
    # ====================

    async def propagate(self, update: InventoryUpdate) -> List[PropagationResult]:
        """
        Deliver an update to every active warehouse except its origin.

        Returns:
            One settled result per target, in registration order
        """
        targets = self.registry.active_targets(excluding=update.warehouse_id)
        if not targets:
            return []

        return list(await asyncio.gather(
            *(self._deliver(target, update) for target in targets)
        ))

    async def _deliver(self, target: Warehouse, update: InventoryUpdate) -> PropagationResult:
        # The timeout bounds the commit only; events go out once it has settled
        try:
            if self.propagation_timeout is None:
                record, conflict = await self.commit_to_warehouse(target, update)
            else:
                record, conflict = await asyncio.wait_for(
                    self.commit_to_warehouse(target, update),
                    timeout=self.propagation_timeout,
                )
        except asyncio.TimeoutError:
            error = PropagationError(
                f"Sync to {target.warehouse_id} timed out after {self.propagation_timeout}s",
                warehouse_id=target.warehouse_id,
                reason="timeout",
            )
        except Exception as e:
            error = e
        else:
            return await self._announce(target, update, record, conflict)

        target.lag += 1
        logger.error(f"Sync failed to {target.warehouse_id} for update {update.update_id}: {error}")
        return PropagationResult(
            warehouse_id=target.warehouse_id,
            update_id=update.update_id,
            error=str(error),
        )

    async def sync_to_warehouse(self, target: Warehouse, update: InventoryUpdate) -> PropagationResult:
        """
        Apply an update at one target and publish the outcome.

        Raises:
            InsufficientInventoryError: If a conflict-free reserve cannot be satisfied
        """
        record, conflict = await self.commit_to_warehouse(target, update)
        return await self._announce(target, update, record, conflict)

    async def commit_to_warehouse(
        self,
        target: Warehouse,
        update: InventoryUpdate,
    ) -> Tuple[Optional[InventoryRecord], Optional[Conflict]]:
        """
        Apply an update at one target, resolving a version conflict if there is one.

        Publishes nothing. Returns the committed record (None when the current
        state was kept) and the conflict, if one was detected.

        Raises:
            InsufficientInventoryError: If a conflict-free reserve cannot be satisfied
        """
        conflict: Optional[Conflict] = None

        async with self.registry.lock_for(target.warehouse_id, update.product_id):
            current = self.registry.get_record(target.warehouse_id, update.product_id)

            if current is None or current.version < update.target_version:
                record = await self.applier.apply(target.warehouse_id, update)
            else:
                conflict, record = await self._resolve_conflict(target, update, current)

            target.last_sync = self._clock()

        return record, conflict

    async def _announce(
        self,
        target: Warehouse,
        update: InventoryUpdate,
        record: Optional[InventoryRecord],
        conflict: Optional[Conflict],
    ) -> PropagationResult:
        if record is not None:
            await self.applier.announce(target.warehouse_id, update, record)

        if conflict is None:
            return PropagationResult(
                warehouse_id=target.warehouse_id,
                update_id=update.update_id,
                applied=True,
            )

        await publish_inventory_conflict(self.event_bus, conflict)
        return PropagationResult(
            warehouse_id=target.warehouse_id,
            update_id=update.update_id,
            applied=conflict.resolution == ConflictResolution.ACCEPTED_INCOMING,
            conflict_id=conflict.conflict_id,
            resolution=conflict.resolution,
        )

    # ====================
    # Conflict Resolution
    # ====================

    async def _resolve_conflict(
        self,
        target: Warehouse,
        update: InventoryUpdate,
        current: InventoryRecord,
    ) -> Tuple[Conflict, Optional[InventoryRecord]]:
        """
        Resolve a stale-version collision by last-write-wins.

        The newer timestamp wins. An accepted update keeps the higher of the
        two versions so a record's version never goes backwards.
        """
        conflict = Conflict(
            conflict_id=f"conf_{uuid.uuid4().hex[:16]}",
            warehouse_id=target.warehouse_id,
            product_id=update.product_id,
            incoming_update=update,
            current_state=current.model_copy(),
            detected_at=self._clock(),
        )

        record: Optional[InventoryRecord] = None
        if current.last_updated is None or update.timestamp > current.last_updated:
            try:
                record = await self.applier.apply(
                    target.warehouse_id,
                    update,
                    version=max(current.version, update.target_version),
                )
                conflict.resolution = ConflictResolution.ACCEPTED_INCOMING
                logger.warning(
                    f"Conflict resolved at {target.warehouse_id}: accepted newer update "
                    f"{update.update_id} for {update.product_id}"
                )
            except InsufficientInventoryError as e:
                conflict.resolution = ConflictResolution.KEPT_CURRENT
                logger.warning(
                    f"Conflict at {target.warehouse_id}: newer update {update.update_id} "
                    f"could not be applied ({e}); kept current state for {update.product_id}"
                )
        else:
            conflict.resolution = ConflictResolution.KEPT_CURRENT
            logger.warning(
                f"Conflict resolved at {target.warehouse_id}: kept current state "
                f"for {update.product_id} (v{current.version})"
            )

        conflict.resolved = True
        self._conflicts.append(conflict)
        return conflict, record
