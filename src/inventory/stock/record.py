"""StockRecord aggregate (CQRS) — quantity on hand for one product/variation/size at one warehouse.

Stock Level Model:
    current_stock:   Physical count at the warehouse
    reserved_stock:  Earmarked for in-progress orders
    available_stock: current_stock - reserved_stock (derived, may go negative
                     when reservations outrun the count)

The record is state-stored, not event sourced. Every write goes through the
repository, which bumps `_version` and rejects stale writes, so adjustments
on one record are linearizable.
"""

from datetime import UTC, datetime
from enum import Enum

from protean import atomic_change, invariant
from protean.exceptions import ValidationError
from protean.fields import Boolean, DateTime, Identifier, Integer, String

from inventory.domain import inventory
from inventory.stock.events import (
    LowStockDetected,
    ProductStockLevelChanged,
    ReservedStockSet,
    StockAdjusted,
    StockRecordCreated,
    StockRecordSynced,
    StockSettingsUpdated,
    StockTransferredIn,
    StockTransferredOut,
)
from inventory.stock.exceptions import InsufficientStock, InvalidStockOperation
from inventory.stock.status import StockStatus, derive_status


class MovementType(Enum):
    IN = "IN"
    OUT = "OUT"


class ReferenceType(Enum):
    ADJUSTMENT = "ADJUSTMENT"
    TRANSFER_IN = "TRANSFER_IN"
    TRANSFER_OUT = "TRANSFER_OUT"
    PRODUCT_SYNC = "PRODUCT_SYNC"
    INITIAL_STOCK = "INITIAL_STOCK"


def normalize_key_part(value):
    """Empty or whitespace-only key parts are treated as absent."""
    if value is None:
        return None
    value = str(value).strip()
    return value or None


@inventory.aggregate
class StockRecord:
    """Quantity on hand for one product/variation/size at one warehouse."""

    product_id = Identifier(required=True)
    variation_id = Identifier()
    size = String(max_length=20)
    warehouse_id = Identifier(required=True)
    current_stock = Integer(default=0, min_value=0)
    reserved_stock = Integer(default=0, min_value=0)
    reorder_point = Integer(default=10, min_value=0)
    reorder_quantity = Integer(default=50, min_value=0)
    max_stock = Integer(min_value=0)
    allow_backorders = Boolean(default=False)
    status = String(choices=StockStatus, default=StockStatus.IN_STOCK.value)
    last_restocked = DateTime()
    last_sold = DateTime()
    created_at = DateTime()
    updated_at = DateTime()

    @invariant.post
    def max_stock_cannot_be_below_reorder_point(self):
        if self.max_stock is not None and self.max_stock < (self.reorder_point or 0):
            raise ValidationError({"max_stock": ["Maximum stock cannot be below the reorder point"]})

    @property
    def available_stock(self):
        return (self.current_stock or 0) - (self.reserved_stock or 0)

    @property
    def key(self):
        """Uniqueness key: (product_id, variation_id, warehouse_id, size)."""
        return (
            str(self.product_id),
            normalize_key_part(self.variation_id),
            str(self.warehouse_id),
            normalize_key_part(self.size),
        )

    # -------------------------------------------------------------------
    # Factory method
    # -------------------------------------------------------------------
    @classmethod
    def create(
        cls,
        product_id,
        warehouse_id,
        current_stock=0,
        variation_id=None,
        size=None,
        reserved_stock=0,
        reorder_point=10,
        reorder_quantity=50,
        max_stock=None,
        allow_backorders=False,
    ):
        """Open a stock record. Status is derived from the opening balance."""
        if current_stock is None or current_stock < 0:
            raise InvalidStockOperation({"current_stock": ["Current stock cannot be negative"]})

        now = datetime.now(UTC)
        record = cls(
            product_id=product_id,
            variation_id=normalize_key_part(variation_id),
            size=normalize_key_part(size),
            warehouse_id=warehouse_id,
            current_stock=current_stock,
            reserved_stock=reserved_stock or 0,
            reorder_point=reorder_point,
            reorder_quantity=reorder_quantity,
            max_stock=max_stock,
            allow_backorders=bool(allow_backorders),
            status=derive_status(current_stock, reorder_point, allow_backorders),
            last_restocked=now if current_stock > 0 else None,
            created_at=now,
            updated_at=now,
        )
        record.raise_(
            StockRecordCreated(
                inventory_id=str(record.id),
                product_id=str(record.product_id),
                variation_id=record.variation_id,
                size=record.size,
                warehouse_id=str(record.warehouse_id),
                current_stock=record.current_stock,
                reserved_stock=record.reserved_stock,
                reorder_point=record.reorder_point,
                reorder_quantity=record.reorder_quantity,
                max_stock=record.max_stock,
                status=record.status,
                created_at=now,
            )
        )
        return record

    # -------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------
    def _refresh_status(self):
        """Re-derive status from the current count. Returns the previous status."""
        previous = self.status
        if self.status != StockStatus.DISCONTINUED.value:
            self.status = derive_status(self.current_stock, self.reorder_point, self.allow_backorders)
        return previous

    def _check_low_stock(self, previous_status):
        """Raise LowStockDetected when the status has just dropped to low or out of stock."""
        dropped = (StockStatus.LOW_STOCK.value, StockStatus.OUT_OF_STOCK.value)
        if self.status in dropped and self.status != previous_status:
            self.raise_(
                LowStockDetected(
                    inventory_id=str(self.id),
                    product_id=str(self.product_id),
                    warehouse_id=str(self.warehouse_id),
                    current_stock=self.current_stock,
                    reorder_point=self.reorder_point,
                    reorder_quantity=self.reorder_quantity,
                    status=self.status,
                    detected_at=self.updated_at,
                )
            )

    def _apply_stock_change(self, new_stock, now):
        previous_stock = self.current_stock
        self.current_stock = new_stock
        if new_stock > previous_stock:
            self.last_restocked = now
        elif new_stock < previous_stock:
            self.last_sold = now
        self.updated_at = now
        return previous_stock

    # -------------------------------------------------------------------
    # Adjustments
    # -------------------------------------------------------------------
    def adjust(self, quantity, movement_type=None, reference_id=None, reference_type=None, notes=None):
        """Change current stock by a signed quantity.

        The ledger has no backorder support: an adjustment that would take
        current stock below zero is rejected and the record is left as is.
        """
        if not quantity:
            raise InvalidStockOperation({"quantity": ["Adjustment quantity must be non-zero"]})

        if movement_type is None:
            movement_type = MovementType.IN.value if quantity > 0 else MovementType.OUT.value
        if movement_type not in (MovementType.IN.value, MovementType.OUT.value):
            raise InvalidStockOperation({"type": [f"Unknown movement type '{movement_type}'"]})
        if (movement_type == MovementType.IN.value) != (quantity > 0):
            raise InvalidStockOperation({"type": [f"{movement_type} movement cannot carry a quantity of {quantity}"]})

        new_stock = self.current_stock + quantity
        if new_stock < 0:
            raise InvalidStockOperation(
                {"quantity": [f"Insufficient stock for adjustment: {self.current_stock} on hand, change of {quantity}"]}
            )

        now = datetime.now(UTC)
        previous_stock = self._apply_stock_change(new_stock, now)
        previous_status = self._refresh_status()

        self.raise_(
            StockAdjusted(
                inventory_id=str(self.id),
                product_id=str(self.product_id),
                warehouse_id=str(self.warehouse_id),
                movement_type=movement_type,
                quantity=quantity,
                previous_stock=previous_stock,
                new_stock=new_stock,
                status=self.status,
                reference_id=reference_id,
                reference_type=reference_type or ReferenceType.ADJUSTMENT.value,
                notes=notes,
                adjusted_at=now,
            )
        )
        self._check_low_stock(previous_status)

    def set_stock(self, current_stock, notes=None):
        """Set current stock to an absolute value, recorded as an adjustment of the difference."""
        if current_stock is None or current_stock < 0:
            raise InvalidStockOperation({"current_stock": ["Current stock cannot be negative"]})
        delta = current_stock - self.current_stock
        if delta:
            self.adjust(delta, reference_type=ReferenceType.ADJUSTMENT.value, notes=notes)

    def set_reserved(self, reserved_stock):
        """Set reserved stock directly. Used by order reservation flows."""
        if reserved_stock is None or reserved_stock < 0:
            raise InvalidStockOperation({"reserved_stock": ["Reserved stock cannot be negative"]})

        previous = self.reserved_stock
        self.reserved_stock = reserved_stock
        self.updated_at = datetime.now(UTC)
        self.raise_(
            ReservedStockSet(
                inventory_id=str(self.id),
                previous_reserved=previous,
                new_reserved=reserved_stock,
                set_at=self.updated_at,
            )
        )

    def update_settings(self, reorder_point=None, reorder_quantity=None, max_stock=None, discontinued=None):
        """Change reorder settings and/or the discontinued flag."""
        previous_status = self.status
        with atomic_change(self):
            if reorder_point is not None:
                self.reorder_point = reorder_point
            if reorder_quantity is not None:
                self.reorder_quantity = reorder_quantity
            if max_stock is not None:
                self.max_stock = max_stock

        if discontinued is True:
            self.status = StockStatus.DISCONTINUED.value
        elif discontinued is False and self.status == StockStatus.DISCONTINUED.value:
            self.status = derive_status(self.current_stock, self.reorder_point, self.allow_backorders)
        else:
            self._refresh_status()

        self.updated_at = datetime.now(UTC)
        self.raise_(
            StockSettingsUpdated(
                inventory_id=str(self.id),
                reorder_point=self.reorder_point,
                reorder_quantity=self.reorder_quantity,
                max_stock=self.max_stock,
                previous_status=previous_status,
                status=self.status,
                updated_at=self.updated_at,
            )
        )
        self._check_low_stock(previous_status)

    # -------------------------------------------------------------------
    # Transfers
    # -------------------------------------------------------------------
    def transfer_out(self, destination, quantity, notes=None):
        """Send stock to `destination`. All checks run before either side changes."""
        if quantity is None or quantity <= 0:
            raise InvalidStockOperation({"quantity": ["Transfer quantity must be positive"]})
        if str(destination.id) == str(self.id) or str(destination.warehouse_id) == str(self.warehouse_id):
            raise InvalidStockOperation({"to_warehouse": ["Cannot transfer stock to the same warehouse"]})
        if self.current_stock < quantity:
            raise InsufficientStock(
                {"quantity": [f"Insufficient stock for transfer: {self.current_stock} on hand, {quantity} requested"]}
            )

        now = datetime.now(UTC)
        previous_stock = self._apply_stock_change(self.current_stock - quantity, now)
        previous_status = self._refresh_status()

        self.raise_(
            StockTransferredOut(
                inventory_id=str(self.id),
                product_id=str(self.product_id),
                warehouse_id=str(self.warehouse_id),
                to_inventory_id=str(destination.id),
                to_warehouse_id=str(destination.warehouse_id),
                quantity=quantity,
                previous_stock=previous_stock,
                new_stock=self.current_stock,
                status=self.status,
                notes=f"Transferred to {destination.id}: {notes or ''}",
                transferred_at=now,
            )
        )
        self._check_low_stock(previous_status)

    def receive_transfer(self, source, quantity, notes=None):
        """Take in stock sent by `source`."""
        now = datetime.now(UTC)
        previous_stock = self._apply_stock_change(self.current_stock + quantity, now)
        self._refresh_status()

        self.raise_(
            StockTransferredIn(
                inventory_id=str(self.id),
                product_id=str(self.product_id),
                warehouse_id=str(self.warehouse_id),
                from_inventory_id=str(source.id),
                from_warehouse_id=str(source.warehouse_id),
                quantity=quantity,
                previous_stock=previous_stock,
                new_stock=self.current_stock,
                status=self.status,
                notes=f"Transferred from {source.id}: {notes or ''}",
                transferred_at=now,
            )
        )

    # -------------------------------------------------------------------
    # Product sync
    # -------------------------------------------------------------------
    def sync_from_product(self, current_stock, allow_backorders=False, reorder_point=None):
        """Overwrite stock from the owning product. Returns True if anything changed.

        Values are absolute, so syncing the same product state twice changes
        nothing the second time.
        A current_stock of None keeps the ledger's stock and syncs only the settings.
        """
        if current_stock is None:
            current_stock = self.current_stock
        elif current_stock < 0:
            raise InvalidStockOperation({"current_stock": ["Current stock cannot be negative"]})

        target_reorder_point = self.reorder_point if reorder_point is None else reorder_point
        changed = (
            current_stock != self.current_stock
            or bool(allow_backorders) != bool(self.allow_backorders)
            or target_reorder_point != self.reorder_point
        )
        if not changed:
            return False

        now = datetime.now(UTC)
        self.allow_backorders = bool(allow_backorders)
        self.reorder_point = target_reorder_point
        previous_stock = self._apply_stock_change(current_stock, now)
        previous_status = self._refresh_status()

        self.raise_(
            StockRecordSynced(
                inventory_id=str(self.id),
                product_id=str(self.product_id),
                warehouse_id=str(self.warehouse_id),
                size=self.size,
                previous_stock=previous_stock,
                new_stock=current_stock,
                status=self.status,
                synced_at=now,
            )
        )
        self._check_low_stock(previous_status)
        return True

    def announce_product_level(self, total_stock, warehouse_stock=None):
        """Publish the absolute stock held for this record's product/variation across all records.

        warehouse_stock defaults to this record's own stock; a deleted record announces 0.
        """
        if self.status == StockStatus.DISCONTINUED.value:
            status = self.status
        else:
            status = derive_status(total_stock, self.reorder_point, self.allow_backorders)

        self.raise_(
            ProductStockLevelChanged(
                product_id=str(self.product_id),
                variation_id=self.variation_id,
                stock_quantity=total_stock,
                status=status,
                changed_at=datetime.now(UTC),
                size=self.size,
                warehouse_id=str(self.warehouse_id),
                warehouse_stock=self.current_stock if warehouse_stock is None else warehouse_stock,
            )
        )
