"""Tests for transfers between two StockRecords."""

import pytest
from inventory.stock.events import LowStockDetected, StockTransferredIn, StockTransferredOut
from inventory.stock.exceptions import InsufficientStock, InvalidStockOperation
from inventory.stock.record import StockRecord
from inventory.stock.status import StockStatus


def _pair(source_stock=50, destination_stock=5):
    source = StockRecord.create(product_id="prod-001", warehouse_id="wh-a", size="M", current_stock=source_stock)
    destination = StockRecord.create(
        product_id="prod-001", warehouse_id="wh-b", size="M", current_stock=destination_stock
    )
    return source, destination


def _transfer(source, destination, quantity, notes=None):
    source.transfer_out(destination, quantity, notes=notes)
    destination.receive_transfer(source, quantity, notes=notes)


class TestTransferOut:
    def test_transfer_moves_stock(self):
        source, destination = _pair(50, 5)
        _transfer(source, destination, 20)
        assert source.current_stock == 30
        assert destination.current_stock == 25

    def test_transfer_conserves_total(self):
        source, destination = _pair(37, 11)
        _transfer(source, destination, 37)
        assert source.current_stock + destination.current_stock == 48
        assert source.status == StockStatus.OUT_OF_STOCK.value

    def test_insufficient_stock_is_rejected_before_any_change(self):
        source, destination = _pair(10, 5)
        with pytest.raises(InsufficientStock) as exc_info:
            source.transfer_out(destination, 11)
        assert "quantity" in exc_info.value.messages
        assert source.current_stock == 10
        assert destination.current_stock == 5

    def test_insufficient_stock_is_an_invalid_operation(self):
        source, destination = _pair(1, 0)
        with pytest.raises(InvalidStockOperation):
            source.transfer_out(destination, 2)

    @pytest.mark.parametrize("quantity", [0, -3])
    def test_non_positive_quantity_is_rejected(self, quantity):
        source, destination = _pair()
        with pytest.raises(InvalidStockOperation) as exc_info:
            source.transfer_out(destination, quantity)
        assert "quantity" in exc_info.value.messages

    def test_same_warehouse_is_rejected(self):
        source = StockRecord.create(product_id="prod-001", warehouse_id="wh-a", size="M", current_stock=10)
        other = StockRecord.create(product_id="prod-001", warehouse_id="wh-a", size="L", current_stock=10)
        with pytest.raises(InvalidStockOperation) as exc_info:
            source.transfer_out(other, 1)
        assert "to_warehouse" in exc_info.value.messages


class TestTransferEvents:
    def test_source_raises_transferred_out(self):
        source, destination = _pair(50, 5)
        _transfer(source, destination, 20, notes="Rebalance")

        events = [e for e in source._events if isinstance(e, StockTransferredOut)]
        assert len(events) == 1
        event = events[0]
        assert event.to_inventory_id == str(destination.id)
        assert event.to_warehouse_id == "wh-b"
        assert event.quantity == 20
        assert event.previous_stock == 50
        assert event.new_stock == 30
        assert event.notes == f"Transferred to {destination.id}: Rebalance"

    def test_destination_raises_transferred_in(self):
        source, destination = _pair(50, 5)
        _transfer(source, destination, 20, notes="Rebalance")

        events = [e for e in destination._events if isinstance(e, StockTransferredIn)]
        assert len(events) == 1
        event = events[0]
        assert event.from_inventory_id == str(source.id)
        assert event.previous_stock == 5
        assert event.new_stock == 25
        assert event.notes == f"Transferred from {source.id}: Rebalance"

    def test_draining_source_raises_low_stock(self):
        source, destination = _pair(50, 5)
        _transfer(source, destination, 45)
        assert any(isinstance(e, LowStockDetected) for e in source._events)
