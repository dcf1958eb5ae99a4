"""Round trips across the product/inventory stock bridge.

Product writes reach the stock ledger through ProductStockUpdated, and ledger
changes come back to the product through ProductStockLevelChanged. Events are
carried between the two domains in their shared contract shapes.
"""

from catalogue.product.events import ProductStockUpdated as CatalogueStockUpdated
from catalogue.product.inventory_events import InventoryCatalogueEventHandler
from catalogue.product.product import Product
from inventory.stock.catalogue_events import CatalogueInventoryEventHandler
from inventory.stock.events import ProductStockLevelChanged as LedgerLevelChanged
from inventory.stock.record import StockRecord
from shared.events import catalogue as catalogue_contracts
from shared.events import inventory as inventory_contracts


def _last(events, event_cls):
    return [e for e in events if isinstance(e, event_cls)][-1]


def _to_inventory(event):
    return catalogue_contracts.ProductStockUpdated(
        product_id=str(event.product_id),
        manage_stock=event.manage_stock,
        allow_backorders=event.allow_backorders,
        warehouse_id=event.warehouse_id,
        reorder_point=event.reorder_point,
        stock_lines=event.stock_lines,
        changed_fields=event.changed_fields,
        updated_at=event.updated_at,
    )


def _to_catalogue(event):
    return inventory_contracts.ProductStockLevelChanged(
        product_id=str(event.product_id),
        variation_id=event.variation_id,
        stock_quantity=event.stock_quantity,
        status=event.status,
        changed_at=event.changed_at,
        size=event.size,
        warehouse_id=event.warehouse_id,
        warehouse_stock=event.warehouse_stock,
    )


def _publish_product(catalogue_domain, product):
    """Persist the product and return its latest stock announcement in contract form."""
    with catalogue_domain.domain_context():
        announced = _to_inventory(_last(product._events, CatalogueStockUpdated))
        catalogue_domain.repository_for(Product).add(product)
    return announced


def _sell(inventory_domain, product_id, quantity, size=None, variation_id=None):
    """Take stock off one record and return the ledger's product-level announcement."""
    with inventory_domain.domain_context():
        repo = inventory_domain.repository_for(StockRecord)
        record = repo.find_by_key(product_id, "main", variation_id=variation_id, size=size)
        record.adjust(quantity=-quantity, reference_type="order")
        record.announce_product_level(repo.total_stock_with(record))
        announced = _to_catalogue(_last(record._events, LedgerLevelChanged))
        repo.add(record)
    return announced


def _transfer(inventory_domain, product_id, to_warehouse, quantity):
    """Move stock out of the main record and return the ledger's product-level announcement."""
    with inventory_domain.domain_context():
        repo = inventory_domain.repository_for(StockRecord)
        source = repo.find_by_key(product_id, "main")
        destination = repo.find_by_key(product_id, to_warehouse)
        total_stock = repo.total_stock_for(product_id)
        source.transfer_out(destination, quantity)
        destination.receive_transfer(source, quantity)
        source.announce_product_level(total_stock)
        announced = _to_catalogue(_last(source._events, LedgerLevelChanged))
        repo.add(source)
        repo.add(destination)
    return announced


def _sync_to_inventory(inventory_domain, announced):
    with inventory_domain.domain_context():
        CatalogueInventoryEventHandler().on_product_stock_updated(announced)


def _refresh_product(catalogue_domain, level):
    with catalogue_domain.domain_context():
        InventoryCatalogueEventHandler().on_product_stock_level_changed(level)


def _toggle_backorders(catalogue_domain, product_id):
    with catalogue_domain.domain_context():
        product = catalogue_domain.repository_for(Product).get(product_id)
        product.update_stock(allow_backorders=True)
    return _publish_product(catalogue_domain, product)


class TestSizedProductRoundTrip:
    def test_sizes_reach_the_ledger_and_levels_come_back(self, _inventory_domain, _catalogue_domain):
        with _catalogue_domain.domain_context():
            product = Product.create(
                name="Classic Tee",
                slug="classic-tee",
                sku="TEE-001",
                reorder_point=3,
                size_inventory={"S": 10, "M": 0},
            )
        product_id = str(product.id)
        announced = _publish_product(_catalogue_domain, product)

        with _inventory_domain.domain_context():
            CatalogueInventoryEventHandler().on_product_stock_updated(announced)
            records = _inventory_domain.repository_for(StockRecord).for_product(product_id)
            assert sorted((r.size, r.current_stock, r.status) for r in records) == [
                ("M", 0, "out_of_stock"),
                ("S", 10, "in_stock"),
            ]

        level = _sell(_inventory_domain, product_id, 8, size="S")
        assert (level.stock_quantity, level.status) == (2, "low_stock")

        with _catalogue_domain.domain_context():
            InventoryCatalogueEventHandler().on_product_stock_level_changed(level)
            refreshed = _catalogue_domain.repository_for(Product).get(product_id)
            assert refreshed.stock_quantity == 2
            assert refreshed.stock_status == "instock"
            assert refreshed.in_stock is True
            assert {s.size: s.quantity for s in refreshed.size_inventory} == {"S": 2, "M": 0}

    def test_selling_out_marks_product_out_of_stock(self, _inventory_domain, _catalogue_domain):
        with _catalogue_domain.domain_context():
            product = Product.create(name="Cap", slug="cap", sku="CAP-001", size_inventory={"OS": 4})
        product_id = str(product.id)
        announced = _publish_product(_catalogue_domain, product)

        with _inventory_domain.domain_context():
            CatalogueInventoryEventHandler().on_product_stock_updated(announced)

        level = _sell(_inventory_domain, product_id, 4, size="OS")

        with _catalogue_domain.domain_context():
            InventoryCatalogueEventHandler().on_product_stock_level_changed(level)
            refreshed = _catalogue_domain.repository_for(Product).get(product_id)
            assert refreshed.stock_quantity == 0
            assert refreshed.stock_status == "outofstock"
            assert refreshed.in_stock is False

    def test_redelivered_announcement_changes_nothing(self, _inventory_domain, _catalogue_domain):
        with _catalogue_domain.domain_context():
            product = Product.create(name="Sock", slug="sock", sku="SOCK-001", size_inventory={"S": 5})
        product_id = str(product.id)
        announced = _publish_product(_catalogue_domain, product)

        with _inventory_domain.domain_context():
            handler = CatalogueInventoryEventHandler()
            handler.on_product_stock_updated(announced)
            before = {r.size: r._version for r in _inventory_domain.repository_for(StockRecord).for_product(product_id)}

            handler.on_product_stock_updated(announced)
            after = {r.size: r._version for r in _inventory_domain.repository_for(StockRecord).for_product(product_id)}

        assert after == before


class TestVariationRoundTrip:
    def test_variation_level_comes_back_to_that_variation(self, _inventory_domain, _catalogue_domain):
        with _catalogue_domain.domain_context():
            product = Product.create(name="Hoodie", slug="hoodie", sku="HOOD-001")
            red = product.add_variation(sku="HOOD-001-RED", price=40.0, stock_quantity=6)
            blue = product.add_variation(sku="HOOD-001-BLU", price=40.0, stock_quantity=3)
        product_id = str(product.id)
        announced = _publish_product(_catalogue_domain, product)

        with _inventory_domain.domain_context():
            CatalogueInventoryEventHandler().on_product_stock_updated(announced)
            records = _inventory_domain.repository_for(StockRecord).for_product(product_id)
            assert sorted((r.variation_id, r.current_stock) for r in records) == sorted(
                [(str(red.id), 6), (str(blue.id), 3)]
            )

        level = _sell(_inventory_domain, product_id, 3, variation_id=str(blue.id))
        assert level.variation_id == str(blue.id)
        assert level.stock_quantity == 0

        with _catalogue_domain.domain_context():
            InventoryCatalogueEventHandler().on_product_stock_level_changed(level)
            variations = {str(v.id): v for v in _catalogue_domain.repository_for(Product).get(product_id).variations}
            assert variations[str(blue.id)].stock_quantity == 0
            assert variations[str(blue.id)].stock_status == "outofstock"
            assert variations[str(red.id)].stock_quantity == 6


class TestLedgerStockSurvivesProductWrites:
    def test_backorder_toggle_keeps_sold_size_stock(self, _inventory_domain, _catalogue_domain):
        with _catalogue_domain.domain_context():
            product = Product.create(name="Polo", slug="polo", sku="POLO-001", size_inventory={"S": 10})
        product_id = str(product.id)
        _sync_to_inventory(_inventory_domain, _publish_product(_catalogue_domain, product))

        _refresh_product(_catalogue_domain, _sell(_inventory_domain, product_id, 8, size="S"))
        _sync_to_inventory(_inventory_domain, _toggle_backorders(_catalogue_domain, product_id))

        with _inventory_domain.domain_context():
            record = _inventory_domain.repository_for(StockRecord).find_by_key(product_id, "main", size="S")
            assert record.current_stock == 2
            assert record.allow_backorders is True

    def test_merchant_size_edit_still_sets_stock(self, _inventory_domain, _catalogue_domain):
        with _catalogue_domain.domain_context():
            product = Product.create(name="Vest", slug="vest", sku="VEST-001", size_inventory={"S": 10, "M": 5})
        product_id = str(product.id)
        _sync_to_inventory(_inventory_domain, _publish_product(_catalogue_domain, product))
        _refresh_product(_catalogue_domain, _sell(_inventory_domain, product_id, 8, size="S"))

        with _catalogue_domain.domain_context():
            product = _catalogue_domain.repository_for(Product).get(product_id)
            product.update_stock(size_inventory={"S": 2, "M": 9})
        _sync_to_inventory(_inventory_domain, _publish_product(_catalogue_domain, product))

        with _inventory_domain.domain_context():
            records = _inventory_domain.repository_for(StockRecord).for_product(product_id)
            assert {r.size: r.current_stock for r in records} == {"S": 2, "M": 9}


class TestMultiWarehouseRoundTrip:
    def test_transfer_then_product_write_keeps_total(self, _inventory_domain, _catalogue_domain):
        with _catalogue_domain.domain_context():
            product = Product.create(name="Mug", slug="mug", sku="MUG-001", stock_quantity=20)
        product_id = str(product.id)
        _sync_to_inventory(_inventory_domain, _publish_product(_catalogue_domain, product))

        with _inventory_domain.domain_context():
            _inventory_domain.repository_for(StockRecord).add(
                StockRecord.create(product_id=product_id, warehouse_id="east", current_stock=0)
            )

        level = _transfer(_inventory_domain, product_id, "east", 5)
        assert level.stock_quantity == 20
        _refresh_product(_catalogue_domain, level)
        _sync_to_inventory(_inventory_domain, _toggle_backorders(_catalogue_domain, product_id))

        with _inventory_domain.domain_context():
            repo = _inventory_domain.repository_for(StockRecord)
            assert repo.find_by_key(product_id, "main").current_stock == 15
            assert repo.find_by_key(product_id, "east").current_stock == 5
            assert repo.total_stock_for(product_id) == 20

        with _catalogue_domain.domain_context():
            assert _catalogue_domain.repository_for(Product).get(product_id).stock_quantity == 20
