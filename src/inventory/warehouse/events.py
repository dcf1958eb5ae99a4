"""Domain events for the Warehouse aggregate."""

from protean.fields import Boolean, DateTime, Identifier, String, Text

from inventory.domain import inventory


@inventory.event(part_of="Warehouse")
class WarehouseCreated:
    """A new warehouse was created."""

    __version__ = 1

    warehouse_id = Identifier(required=True)
    name = String(required=True)
    code = String(required=True)
    address = Text(required=True)  # JSON-serialized address
    is_default = Boolean(default=False)
    created_at = DateTime(required=True)


@inventory.event(part_of="Warehouse")
class WarehouseUpdated:
    """Warehouse details were updated."""

    __version__ = 1

    warehouse_id = Identifier(required=True)
    name = String(required=True)
    contact_person = String()
    phone = String()
    email = String()
    updated_at = DateTime(required=True)


@inventory.event(part_of="Warehouse")
class WarehouseMarkedDefault:
    """A warehouse was flagged as the default location."""

    __version__ = 1

    warehouse_id = Identifier(required=True)
    marked_at = DateTime(required=True)


@inventory.event(part_of="Warehouse")
class WarehouseDeactivated:
    """A warehouse was deactivated."""

    __version__ = 1

    warehouse_id = Identifier(required=True)
    deactivated_at = DateTime(required=True)
