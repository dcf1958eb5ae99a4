"""Tests for translating ledger stock statuses into product stock statuses."""

import pytest
from catalogue.product.product import ProductStockStatus, to_product_stock_status


class TestToProductStockStatus:
    @pytest.mark.parametrize("status", ["in_stock", "low_stock"])
    def test_sellable_statuses_are_instock(self, status):
        assert to_product_stock_status(status) == ProductStockStatus.INSTOCK.value
        assert to_product_stock_status(status, allow_backorders=True) == ProductStockStatus.INSTOCK.value

    def test_out_of_stock(self):
        assert to_product_stock_status("out_of_stock") == ProductStockStatus.OUTOFSTOCK.value

    def test_out_of_stock_with_backorders(self):
        assert to_product_stock_status("out_of_stock", allow_backorders=True) == ProductStockStatus.ONBACKORDER.value

    def test_discontinued_is_never_sellable(self):
        assert to_product_stock_status("discontinued") == ProductStockStatus.OUTOFSTOCK.value
        assert to_product_stock_status("discontinued", allow_backorders=True) == ProductStockStatus.OUTOFSTOCK.value
