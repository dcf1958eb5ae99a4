"""Application tests for InventoryCatalogueEventHandler — Catalogue reacts to Inventory events.

Covers:
- on_product_stock_level_changed: refreshes product (or variation) stock fields from the ledger
- Products that do not manage stock are left alone
- Failures are logged to the catalogue SyncFailure log instead of raising
"""

import json
from datetime import UTC, datetime

from catalogue.product.creation import CreateProduct
from catalogue.product.inventory_events import InventoryCatalogueEventHandler
from catalogue.product.product import Product
from catalogue.product.stock import AddVariation
from catalogue.projections.sync_failures import SyncFailure
from protean.utils.globals import current_domain
from shared.events.inventory import ProductStockLevelChanged


def _create_product(**overrides):
    defaults = {
        "name": "Classic Tee",
        "slug": "classic-tee",
        "sku": "TEE-001",
        "size_inventory": '{"S": 10, "M": 2}',
    }
    defaults.update(overrides)
    return current_domain.process(CreateProduct(**defaults), asynchronous=False)


def _event(product_id, stock_quantity, status, variation_id=None, **extra):
    return ProductStockLevelChanged(
        product_id=product_id,
        variation_id=variation_id,
        stock_quantity=stock_quantity,
        status=status,
        changed_at=datetime.now(UTC),
        **extra,
    )


def _get(product_id):
    return current_domain.repository_for(Product).get(product_id)


def _failures():
    return current_domain.repository_for(SyncFailure)._dao.query.all().items


class TestProductStockLevelChangedHandler:
    def test_product_level_is_refreshed(self):
        product_id = _create_product()
        InventoryCatalogueEventHandler().on_product_stock_level_changed(_event(product_id, 0, "out_of_stock"))

        product = _get(product_id)
        assert product.stock_quantity == 0
        assert product.stock_status == "outofstock"
        assert product.in_stock is False

    def test_level_without_a_size_leaves_sizes_alone(self):
        product_id = _create_product()
        InventoryCatalogueEventHandler().on_product_stock_level_changed(_event(product_id, 3, "low_stock"))

        product = _get(product_id)
        assert product.stock_quantity == 3
        assert product.stock_status == "instock"
        assert {s.size: s.quantity for s in product.size_inventory} == {"S": 10, "M": 2}

    def test_size_level_in_product_warehouse_sets_that_size(self):
        product_id = _create_product()
        InventoryCatalogueEventHandler().on_product_stock_level_changed(
            _event(product_id, 4, "low_stock", size="S", warehouse_id="main", warehouse_stock=2)
        )

        product = _get(product_id)
        assert product.stock_quantity == 4
        assert {s.size: s.quantity for s in product.size_inventory} == {"S": 2, "M": 2}

    def test_size_level_from_another_warehouse_leaves_sizes_alone(self):
        product_id = _create_product()
        InventoryCatalogueEventHandler().on_product_stock_level_changed(
            _event(product_id, 15, "in_stock", size="S", warehouse_id="east", warehouse_stock=3)
        )

        product = _get(product_id)
        assert product.stock_quantity == 15
        assert {s.size: s.quantity for s in product.size_inventory} == {"S": 10, "M": 2}

    def test_variation_level_is_refreshed(self):
        product_id = _create_product(size_inventory=None)
        red = current_domain.process(
            AddVariation(product_id=product_id, sku="TEE-001-RED", price=20.0, stock_quantity=5), asynchronous=False
        )
        blue = current_domain.process(
            AddVariation(product_id=product_id, sku="TEE-001-BLU", price=20.0, stock_quantity=5), asynchronous=False
        )

        InventoryCatalogueEventHandler().on_product_stock_level_changed(
            _event(product_id, 0, "out_of_stock", variation_id=blue)
        )

        variations = {str(v.id): v for v in _get(product_id).variations}
        assert variations[blue].stock_quantity == 0
        assert variations[blue].stock_status == "outofstock"
        assert variations[red].stock_quantity == 5

    def test_unmanaged_product_is_skipped(self):
        product_id = _create_product(manage_stock=False)
        InventoryCatalogueEventHandler().on_product_stock_level_changed(_event(product_id, 0, "out_of_stock"))

        product = _get(product_id)
        assert product.stock_quantity == 12
        assert product.in_stock is True


class TestSyncFailures:
    def test_unknown_product_is_dead_lettered_not_raised(self):
        InventoryCatalogueEventHandler().on_product_stock_level_changed(_event("ghost-product", 4, "in_stock"))

        failures = _failures()
        assert len(failures) == 1
        assert failures[0].direction == "inventory_to_product"
        assert failures[0].product_id == "ghost-product"
        assert json.loads(failures[0].payload)["stock_quantity"] == 4

    def test_unknown_variation_is_dead_lettered(self):
        product_id = _create_product()
        InventoryCatalogueEventHandler().on_product_stock_level_changed(
            _event(product_id, 1, "in_stock", variation_id="no-such-variation")
        )

        assert len(_failures()) == 1
        assert _get(product_id).stock_quantity == 12
