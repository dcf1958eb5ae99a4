"""Tests for Warehouse aggregate."""

import json

import pytest
from inventory.warehouse.events import (
    WarehouseCreated,
    WarehouseDeactivated,
    WarehouseMarkedDefault,
    WarehouseUpdated,
)
from inventory.warehouse.warehouse import Warehouse
from protean.exceptions import ValidationError


def _make_warehouse(**overrides):
    defaults = {
        "name": "Main Warehouse",
        "code": "wh-main",
        "address": {
            "address_line1": "100 Industrial Blvd",
            "city": "Chicago",
            "state": "IL",
            "postal_code": "60601",
            "country": "US",
        },
        "email": " Ops@Example.COM ",
    }
    defaults.update(overrides)
    return Warehouse.create(**defaults)


class TestWarehouseCreation:
    def test_create_sets_name_and_address(self):
        wh = _make_warehouse()
        assert wh.name == "Main Warehouse"
        assert wh.address.address_line1 == "100 Industrial Blvd"
        assert wh.address.city == "Chicago"

    def test_code_is_uppercased(self):
        wh = _make_warehouse(code=" wh-main ")
        assert wh.code == "WH-MAIN"

    def test_email_is_normalized(self):
        wh = _make_warehouse()
        assert wh.email == "ops@example.com"

    def test_new_warehouse_is_active_and_not_default(self):
        wh = _make_warehouse()
        assert wh.is_active is True
        assert wh.is_default is False

    def test_create_raises_event(self):
        wh = _make_warehouse(is_default=True)
        events = [e for e in wh._events if isinstance(e, WarehouseCreated)]
        assert len(events) == 1
        assert events[0].code == "WH-MAIN"
        assert events[0].is_default is True
        assert json.loads(events[0].address)["postal_code"] == "60601"


class TestWarehouseUpdates:
    def test_update_details(self):
        wh = _make_warehouse()
        wh.update_details(name="North Hub", phone="+1-312-555-0100")
        assert wh.name == "North Hub"
        assert wh.phone == "+1-312-555-0100"
        assert any(isinstance(e, WarehouseUpdated) for e in wh._events)

    def test_update_address(self):
        wh = _make_warehouse()
        wh.update_details(
            address={
                "address_line1": "1 Dock Rd",
                "city": "Gary",
                "postal_code": "46401",
                "country": "US",
            }
        )
        assert wh.address.city == "Gary"
        assert wh.address.state is None


class TestWarehouseDefaultAndDeactivation:
    def test_mark_default(self):
        wh = _make_warehouse()
        wh.mark_default()
        assert wh.is_default is True
        assert any(isinstance(e, WarehouseMarkedDefault) for e in wh._events)

    def test_deactivate_clears_default(self):
        wh = _make_warehouse(is_default=True)
        wh.deactivate()
        assert wh.is_active is False
        assert wh.is_default is False
        assert any(isinstance(e, WarehouseDeactivated) for e in wh._events)

    def test_inactive_warehouse_cannot_be_default(self):
        wh = _make_warehouse()
        wh.deactivate()
        with pytest.raises(ValidationError) as exc_info:
            wh.mark_default()
        assert "warehouse" in exc_info.value.messages

    def test_cannot_deactivate_twice(self):
        wh = _make_warehouse()
        wh.deactivate()
        with pytest.raises(ValidationError):
            wh.deactivate()
