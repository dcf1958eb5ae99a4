"""Application tests for warehouse management commands."""

import json

import pytest
from inventory.warehouse.management import (
    CreateWarehouse,
    DeactivateWarehouse,
    MarkDefaultWarehouse,
    UpdateWarehouse,
)
from inventory.warehouse.warehouse import DuplicateWarehouse, Warehouse
from protean import current_domain
from protean.exceptions import ValidationError

ADDRESS = {
    "address_line1": "100 Industrial Blvd",
    "city": "Chicago",
    "state": "IL",
    "postal_code": "60601",
    "country": "US",
}


def _create_warehouse(**overrides):
    defaults = {
        "name": "Main Warehouse",
        "code": "MAIN",
        "address": json.dumps(ADDRESS),
    }
    defaults.update(overrides)
    return current_domain.process(CreateWarehouse(**defaults), asynchronous=False)


def _get(warehouse_id):
    return current_domain.repository_for(Warehouse).get(warehouse_id)


class TestCreateWarehouse:
    def test_create_persists_warehouse(self):
        warehouse_id = _create_warehouse(code="east-1")
        wh = _get(warehouse_id)
        assert wh.code == "EAST-1"
        assert wh.address.postal_code == "60601"

    def test_duplicate_code_is_rejected_case_insensitively(self):
        _create_warehouse(code="EAST")
        with pytest.raises(DuplicateWarehouse) as exc_info:
            _create_warehouse(code="east")
        assert "code" in exc_info.value.messages


class TestUpdateWarehouse:
    def test_update_contact_details(self):
        warehouse_id = _create_warehouse()
        current_domain.process(
            UpdateWarehouse(warehouse_id=warehouse_id, contact_person="Dana Ruiz", email="DANA@EXAMPLE.COM"),
            asynchronous=False,
        )
        wh = _get(warehouse_id)
        assert wh.contact_person == "Dana Ruiz"
        assert wh.email == "dana@example.com"
        assert wh.name == "Main Warehouse"


class TestDefaultAndDeactivation:
    def test_mark_default(self):
        warehouse_id = _create_warehouse()
        current_domain.process(MarkDefaultWarehouse(warehouse_id=warehouse_id), asynchronous=False)
        assert _get(warehouse_id).is_default is True

    def test_more_than_one_default_is_allowed(self):
        first = _create_warehouse(code="A", is_default=True)
        second = _create_warehouse(code="B")
        current_domain.process(MarkDefaultWarehouse(warehouse_id=second), asynchronous=False)
        assert _get(first).is_default is True
        assert _get(second).is_default is True

    def test_deactivate(self):
        warehouse_id = _create_warehouse(is_default=True)
        current_domain.process(DeactivateWarehouse(warehouse_id=warehouse_id), asynchronous=False)
        wh = _get(warehouse_id)
        assert wh.is_active is False
        assert wh.is_default is False

    def test_deactivated_warehouse_cannot_become_default(self):
        warehouse_id = _create_warehouse()
        current_domain.process(DeactivateWarehouse(warehouse_id=warehouse_id), asynchronous=False)
        with pytest.raises(ValidationError):
            current_domain.process(MarkDefaultWarehouse(warehouse_id=warehouse_id), asynchronous=False)
