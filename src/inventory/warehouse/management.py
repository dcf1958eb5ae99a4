"""Warehouse management — commands and handler."""

import json

from protean import handle
from protean.fields import Boolean, Identifier, String, Text
from protean.utils.globals import current_domain

from inventory.domain import inventory
from inventory.warehouse.warehouse import DuplicateWarehouse, Warehouse


@inventory.command(part_of="Warehouse")
class CreateWarehouse:
    """Create a new warehouse."""

    name = String(required=True, max_length=255)
    code = String(required=True, max_length=50)
    address = Text(required=True)  # JSON-encoded address
    contact_person = String(max_length=255)
    phone = String(max_length=50)
    email = String(max_length=255)
    is_default = Boolean(default=False)


@inventory.command(part_of="Warehouse")
class UpdateWarehouse:
    """Update warehouse details."""

    warehouse_id = Identifier(required=True)
    name = String(max_length=255)
    address = Text()  # JSON-encoded address
    contact_person = String(max_length=255)
    phone = String(max_length=50)
    email = String(max_length=255)


@inventory.command(part_of="Warehouse")
class MarkDefaultWarehouse:
    """Flag a warehouse as the default location."""

    warehouse_id = Identifier(required=True)


@inventory.command(part_of="Warehouse")
class DeactivateWarehouse:
    """Deactivate a warehouse."""

    warehouse_id = Identifier(required=True)


def _parse_address(address):
    if address is None:
        return None
    return json.loads(address) if isinstance(address, str) else address


@inventory.command_handler(part_of=Warehouse)
class WarehouseManagementHandler:
    @handle(CreateWarehouse)
    def create_warehouse(self, command):
        repo = current_domain.repository_for(Warehouse)
        code = command.code.strip().upper()
        if repo._dao.query.filter(code=code).all().items:
            raise DuplicateWarehouse({"code": [f"Warehouse code '{code}' is already in use"]})

        warehouse = Warehouse.create(
            name=command.name,
            code=code,
            address=_parse_address(command.address),
            contact_person=command.contact_person,
            phone=command.phone,
            email=command.email,
            is_default=command.is_default or False,
        )
        repo.add(warehouse)
        return str(warehouse.id)

    @handle(UpdateWarehouse)
    def update_warehouse(self, command):
        repo = current_domain.repository_for(Warehouse)
        warehouse = repo.get(command.warehouse_id)
        warehouse.update_details(
            name=command.name,
            address=_parse_address(command.address),
            contact_person=command.contact_person,
            phone=command.phone,
            email=command.email,
        )
        repo.add(warehouse)

    @handle(MarkDefaultWarehouse)
    def mark_default(self, command):
        repo = current_domain.repository_for(Warehouse)
        warehouse = repo.get(command.warehouse_id)
        warehouse.mark_default()
        repo.add(warehouse)

    @handle(DeactivateWarehouse)
    def deactivate_warehouse(self, command):
        repo = current_domain.repository_for(Warehouse)
        warehouse = repo.get(command.warehouse_id)
        warehouse.deactivate()
        repo.add(warehouse)
