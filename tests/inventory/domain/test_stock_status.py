"""Tests for stock status derivation."""

import pytest
from inventory.stock.status import StockStatus, derive_status


class TestDeriveStatus:
    def test_nothing_on_hand_is_out_of_stock(self):
        assert derive_status(0, 10) == StockStatus.OUT_OF_STOCK.value

    def test_nothing_on_hand_with_backorders_is_in_stock(self):
        assert derive_status(0, 10, allow_backorders=True) == StockStatus.IN_STOCK.value

    def test_below_reorder_point_is_low_stock(self):
        assert derive_status(5, 10) == StockStatus.LOW_STOCK.value

    def test_at_reorder_point_is_low_stock(self):
        assert derive_status(10, 10) == StockStatus.LOW_STOCK.value

    def test_above_reorder_point_is_in_stock(self):
        assert derive_status(11, 10) == StockStatus.IN_STOCK.value

    def test_zero_reorder_point_never_reports_low(self):
        assert derive_status(1, 0) == StockStatus.IN_STOCK.value

    def test_missing_reorder_point_is_treated_as_zero(self):
        assert derive_status(3, None) == StockStatus.IN_STOCK.value

    @pytest.mark.parametrize("stock", [0, 1, 10, 500])
    def test_never_derives_discontinued(self, stock):
        assert derive_status(stock, 10) != StockStatus.DISCONTINUED.value
