"""Stock movements — append-only audit trail of every stock change.

Each stock-changing StockRecord event becomes exactly one row. Rows are
never updated or deleted; reads list them newest first.
"""

import uuid
from datetime import UTC, datetime

from protean.core.projector import on
from protean.fields import DateTime, Identifier, Integer, String, Text
from protean.utils.globals import current_domain
from shared.errors import storage_guard

from inventory.domain import inventory
from inventory.stock.events import (
    StockAdjusted,
    StockRecordCreated,
    StockRecordSynced,
    StockTransferredIn,
    StockTransferredOut,
)
from inventory.stock.record import MovementType, ReferenceType, StockRecord


@inventory.projection
class StockMovement:
    movement_id = Identifier(identifier=True, required=True)
    inventory_id = Identifier(required=True)
    product_id = Identifier()
    warehouse_id = Identifier()
    type = String(required=True, max_length=3)
    quantity = Integer(default=0)
    previous_stock = Integer(default=0)
    new_stock = Integer(default=0)
    reference_id = String(max_length=100)
    reference_type = String(max_length=50)
    notes = Text()
    created_at = DateTime(required=True)


def record_movement(
    inventory_id,
    type,
    quantity,
    reference_id=None,
    reference_type=None,
    notes=None,
    product_id=None,
    warehouse_id=None,
    previous_stock=0,
    new_stock=0,
    created_at=None,
):
    """Append one movement and return it."""
    movement = StockMovement(
        movement_id=str(uuid.uuid4()),
        inventory_id=inventory_id,
        product_id=product_id,
        warehouse_id=warehouse_id,
        type=type,
        quantity=quantity,
        previous_stock=previous_stock,
        new_stock=new_stock,
        reference_id=reference_id,
        reference_type=reference_type,
        notes=notes,
        created_at=created_at or datetime.now(UTC),
    )
    with storage_guard():
        current_domain.repository_for(StockMovement).add(movement)
    return movement


def movements_for(inventory_id):
    """All movements of a stock record, newest first."""
    with storage_guard():
        movements = (
            current_domain.repository_for(StockMovement)._dao.query.filter(inventory_id=str(inventory_id)).all().items
        )
    return sorted(movements, key=lambda m: m.created_at, reverse=True)


@inventory.projector(projector_for=StockMovement, aggregates=[StockRecord])
class StockMovementProjector:
    @on(StockRecordCreated)
    def on_stock_record_created(self, event):
        if not event.current_stock:
            return
        record_movement(
            event.inventory_id,
            MovementType.IN.value,
            event.current_stock,
            reference_type=ReferenceType.INITIAL_STOCK.value,
            notes="Initial stock",
            product_id=event.product_id,
            warehouse_id=event.warehouse_id,
            previous_stock=0,
            new_stock=event.current_stock,
            created_at=event.created_at,
        )

    @on(StockAdjusted)
    def on_stock_adjusted(self, event):
        record_movement(
            event.inventory_id,
            event.movement_type,
            event.quantity,
            reference_id=event.reference_id,
            reference_type=event.reference_type,
            notes=event.notes,
            product_id=event.product_id,
            warehouse_id=event.warehouse_id,
            previous_stock=event.previous_stock,
            new_stock=event.new_stock,
            created_at=event.adjusted_at,
        )

    @on(StockTransferredOut)
    def on_stock_transferred_out(self, event):
        record_movement(
            event.inventory_id,
            MovementType.OUT.value,
            -event.quantity,
            reference_id=event.to_inventory_id,
            reference_type=ReferenceType.TRANSFER_OUT.value,
            notes=event.notes,
            product_id=event.product_id,
            warehouse_id=event.warehouse_id,
            previous_stock=event.previous_stock,
            new_stock=event.new_stock,
            created_at=event.transferred_at,
        )

    @on(StockTransferredIn)
    def on_stock_transferred_in(self, event):
        record_movement(
            event.inventory_id,
            MovementType.IN.value,
            event.quantity,
            reference_id=event.from_inventory_id,
            reference_type=ReferenceType.TRANSFER_IN.value,
            notes=event.notes,
            product_id=event.product_id,
            warehouse_id=event.warehouse_id,
            previous_stock=event.previous_stock,
            new_stock=event.new_stock,
            created_at=event.transferred_at,
        )

    @on(StockRecordSynced)
    def on_stock_record_synced(self, event):
        delta = event.new_stock - event.previous_stock
        if not delta:
            return
        record_movement(
            event.inventory_id,
            MovementType.IN.value if delta > 0 else MovementType.OUT.value,
            delta,
            reference_type=ReferenceType.PRODUCT_SYNC.value,
            notes="Synced from product stock",
            product_id=event.product_id,
            warehouse_id=event.warehouse_id,
            previous_stock=event.previous_stock,
            new_stock=event.new_stock,
            created_at=event.synced_at,
        )
