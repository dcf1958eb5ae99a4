"""Domain events for the StockRecord aggregate.

Every stock-changing operation raises exactly one of the movement-bearing
events below; the StockMovement projector turns each of them into an audit
row. ProductStockLevelChanged is the bridge event consumed by the catalogue.
"""

from protean.fields import DateTime, Identifier, Integer, String, Text

from inventory.domain import inventory


@inventory.event(part_of="StockRecord")
class StockRecordCreated:
    """A stock record was opened for a product/variation/size at a warehouse."""

    __version__ = 1

    inventory_id = Identifier(required=True)
    product_id = Identifier(required=True)
    variation_id = Identifier()
    size = String(max_length=20)
    warehouse_id = Identifier(required=True)
    current_stock = Integer(default=0)
    reserved_stock = Integer(default=0)
    reorder_point = Integer(default=0)
    reorder_quantity = Integer(default=0)
    max_stock = Integer()
    status = String(required=True)
    created_at = DateTime(required=True)


@inventory.event(part_of="StockRecord")
class StockAdjusted:
    """Current stock was changed by a signed quantity."""

    __version__ = 1

    inventory_id = Identifier(required=True)
    product_id = Identifier(required=True)
    warehouse_id = Identifier(required=True)
    movement_type = String(required=True)  # IN, OUT
    quantity = Integer(default=0)
    previous_stock = Integer(default=0)
    new_stock = Integer(default=0)
    status = String(required=True)
    reference_id = String(max_length=100)
    reference_type = String(max_length=50)
    notes = Text()
    adjusted_at = DateTime(required=True)


@inventory.event(part_of="StockRecord")
class StockTransferredOut:
    """Stock left this record for another warehouse."""

    __version__ = 1

    inventory_id = Identifier(required=True)
    product_id = Identifier(required=True)
    warehouse_id = Identifier(required=True)
    to_inventory_id = Identifier(required=True)
    to_warehouse_id = Identifier(required=True)
    quantity = Integer(default=0)
    previous_stock = Integer(default=0)
    new_stock = Integer(default=0)
    status = String(required=True)
    notes = Text()
    transferred_at = DateTime(required=True)


@inventory.event(part_of="StockRecord")
class StockTransferredIn:
    """Stock arrived at this record from another warehouse."""

    __version__ = 1

    inventory_id = Identifier(required=True)
    product_id = Identifier(required=True)
    warehouse_id = Identifier(required=True)
    from_inventory_id = Identifier(required=True)
    from_warehouse_id = Identifier(required=True)
    quantity = Integer(default=0)
    previous_stock = Integer(default=0)
    new_stock = Integer(default=0)
    status = String(required=True)
    notes = Text()
    transferred_at = DateTime(required=True)


@inventory.event(part_of="StockRecord")
class ReservedStockSet:
    """Reserved stock was set to an absolute value."""

    __version__ = 1

    inventory_id = Identifier(required=True)
    previous_reserved = Integer(default=0)
    new_reserved = Integer(default=0)
    set_at = DateTime(required=True)


@inventory.event(part_of="StockRecord")
class StockSettingsUpdated:
    """Reorder settings or the discontinued flag changed."""

    __version__ = 1

    inventory_id = Identifier(required=True)
    reorder_point = Integer(default=0)
    reorder_quantity = Integer(default=0)
    max_stock = Integer()
    previous_status = String(required=True)
    status = String(required=True)
    updated_at = DateTime(required=True)


@inventory.event(part_of="StockRecord")
class StockRecordSynced:
    """Current stock was overwritten from the owning product's stock fields."""

    __version__ = 1

    inventory_id = Identifier(required=True)
    product_id = Identifier(required=True)
    warehouse_id = Identifier(required=True)
    size = String(max_length=20)
    previous_stock = Integer(default=0)
    new_stock = Integer(default=0)
    status = String(required=True)
    synced_at = DateTime(required=True)


@inventory.event(part_of="StockRecord")
class LowStockDetected:
    """Derived status moved into low_stock or out_of_stock."""

    __version__ = 1

    inventory_id = Identifier(required=True)
    product_id = Identifier(required=True)
    warehouse_id = Identifier(required=True)
    current_stock = Integer(default=0)
    reorder_point = Integer(default=0)
    reorder_quantity = Integer(default=0)
    status = String(required=True)
    detected_at = DateTime(required=True)


@inventory.event(part_of="StockRecord")
class ProductStockLevelChanged:
    """Aggregate stock for a product (or one of its variations) changed.

    stock_quantity is absolute (summed over every warehouse and size), so the
    catalogue can apply it any number of times with the same result.
    size, warehouse_id and warehouse_stock identify the record that moved and
    its own stock, so a sized product can refresh that size.
    """

    __version__ = 1

    product_id = Identifier(required=True)
    variation_id = Identifier()
    stock_quantity = Integer(default=0)
    status = String(required=True)
    changed_at = DateTime(required=True)
    size = String(max_length=20)
    warehouse_id = Identifier()
    warehouse_stock = Integer()
