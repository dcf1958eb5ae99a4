"""Warehouse aggregate (CQRS) — physical location where stock records live.

Codes are unique across warehouses. The default flag is informational;
nothing prevents more than one warehouse from carrying it.
This is a standard CQRS aggregate (not event sourced).
"""

import json
from datetime import UTC, datetime

from protean.exceptions import ValidationError
from protean.fields import Boolean, DateTime, String, ValueObject

from inventory.domain import inventory
from inventory.warehouse.events import (
    WarehouseCreated,
    WarehouseDeactivated,
    WarehouseMarkedDefault,
    WarehouseUpdated,
)


class DuplicateWarehouse(ValidationError):
    """A warehouse with the same code already exists."""


@inventory.value_object(part_of="Warehouse")
class WarehouseAddress:
    """Physical address of a warehouse."""

    address_line1 = String(required=True, max_length=255)
    address_line2 = String(max_length=255)
    city = String(required=True, max_length=100)
    state = String(max_length=100)
    postal_code = String(required=True, max_length=20)
    country = String(required=True, max_length=100)


@inventory.aggregate
class Warehouse:
    """A physical location where stock is held."""

    name = String(required=True, max_length=255)
    code = String(required=True, max_length=50)
    address = ValueObject(WarehouseAddress)
    contact_person = String(max_length=255)
    phone = String(max_length=50)
    email = String(max_length=255)
    is_active = Boolean(default=True)
    is_default = Boolean(default=False)
    created_at = DateTime()
    updated_at = DateTime()

    @classmethod
    def create(cls, name, code, address, contact_person=None, phone=None, email=None, is_default=False):
        """Create a new warehouse."""
        now = datetime.now(UTC)
        address = WarehouseAddress(**address) if isinstance(address, dict) else address
        warehouse = cls(
            name=name,
            code=code.strip().upper(),
            address=address,
            contact_person=contact_person,
            phone=phone,
            email=email.strip().lower() if email else None,
            is_default=bool(is_default),
            created_at=now,
            updated_at=now,
        )
        warehouse.raise_(
            WarehouseCreated(
                warehouse_id=str(warehouse.id),
                name=name,
                code=warehouse.code,
                address=json.dumps(address.to_dict()),
                is_default=warehouse.is_default,
                created_at=now,
            )
        )
        return warehouse

    def update_details(self, name=None, address=None, contact_person=None, phone=None, email=None):
        """Update warehouse name, address and/or contact details."""
        if name is not None:
            self.name = name
        if address is not None:
            self.address = WarehouseAddress(**address) if isinstance(address, dict) else address
        if contact_person is not None:
            self.contact_person = contact_person
        if phone is not None:
            self.phone = phone
        if email is not None:
            self.email = email.strip().lower()
        self.updated_at = datetime.now(UTC)
        self.raise_(
            WarehouseUpdated(
                warehouse_id=str(self.id),
                name=self.name,
                contact_person=self.contact_person,
                phone=self.phone,
                email=self.email,
                updated_at=self.updated_at,
            )
        )

    def mark_default(self):
        """Flag the warehouse as the default location."""
        if not self.is_active:
            raise ValidationError({"warehouse": ["An inactive warehouse cannot be the default"]})
        self.is_default = True
        self.updated_at = datetime.now(UTC)
        self.raise_(
            WarehouseMarkedDefault(
                warehouse_id=str(self.id),
                marked_at=self.updated_at,
            )
        )

    def deactivate(self):
        """Deactivate the warehouse."""
        if not self.is_active:
            raise ValidationError({"warehouse": ["Warehouse is already inactive"]})
        self.is_active = False
        self.is_default = False
        self.updated_at = datetime.now(UTC)
        self.raise_(
            WarehouseDeactivated(
                warehouse_id=str(self.id),
                deactivated_at=self.updated_at,
            )
        )
