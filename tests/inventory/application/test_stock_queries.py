"""Application tests for StockRecordRepository ledger reads."""

from inventory.stock.creation import CreateStockRecord
from inventory.stock.management import UpdateStockRecord
from inventory.stock.record import StockRecord
from protean import current_domain


def _create(product_id, current_stock, **overrides):
    defaults = {
        "product_id": product_id,
        "warehouse_id": "main",
        "current_stock": current_stock,
        "reorder_point": 10,
    }
    defaults.update(overrides)
    return current_domain.process(CreateStockRecord(**defaults), asynchronous=False)


def _repo():
    return current_domain.repository_for(StockRecord)


def _seed():
    """One record per health bucket: out, low, healthy, discontinued."""
    ids = {
        "out": _create("prod-out", 0),
        "low": _create("prod-low", 5),
        "ok": _create("prod-ok", 50),
        "gone": _create("prod-gone", 30),
    }
    current_domain.process(UpdateStockRecord(inventory_id=ids["gone"], discontinued=True), asynchronous=False)
    return ids


class TestKeyLookups:
    def test_find_by_key_matches_absent_parts(self):
        inventory_id = _create("prod-001", 5)
        _create("prod-001", 5, size="M")

        record = _repo().find_by_key("prod-001", "main")
        assert str(record.id) == inventory_id

    def test_find_by_key_treats_blank_as_absent(self):
        inventory_id = _create("prod-001", 5)
        assert str(_repo().find_by_key("prod-001", "main", variation_id="", size=" ").id) == inventory_id

    def test_find_by_key_miss(self):
        assert _repo().find_by_key("prod-001", "main", size="XL") is None

    def test_find_by_product_filters_size(self):
        _create("prod-001", 5, size="S")
        _create("prod-001", 6, size="M")
        _create("prod-001", 7, size="M", warehouse_id="wh-b")

        records = _repo().find_by_product("prod-001", size="M")
        assert sorted(r.current_stock for r in records) == [6, 7]
        assert len(_repo().find_by_product("prod-001")) == 3

    def test_total_stock_spans_warehouses_and_sizes(self):
        _create("prod-001", 5, size="S")
        _create("prod-001", 6, size="M", warehouse_id="wh-b")
        _create("prod-001", 100, variation_id="var-1")

        assert _repo().total_stock_for("prod-001") == 11
        assert _repo().total_stock_for("prod-001", "var-1") == 100


class TestHealthQueries:
    def test_low_stock_includes_out_of_stock(self):
        _seed()
        assert sorted(r.product_id for r in _repo().low_stock()) == ["prod-low", "prod-out"]

    def test_out_of_stock(self):
        _seed()
        assert [r.product_id for r in _repo().out_of_stock()] == ["prod-out"]

    def test_stats(self):
        _seed()
        assert _repo().stats() == {
            "total": 4,
            "low_stock": 2,
            "out_of_stock": 1,
            "in_stock": 3,
            "discontinued": 1,
        }

    def test_stats_on_empty_ledger(self):
        assert _repo().stats() == {"total": 0, "low_stock": 0, "out_of_stock": 0, "in_stock": 0, "discontinued": 0}


class TestListPage:
    def test_pages_through_records(self):
        for n in range(5):
            _create(f"prod-{n}", n + 1)

        first, total = _repo().list_page(offset=0, limit=2)
        rest, _ = _repo().list_page(offset=2, limit=10)

        assert total == 5
        assert len(first) == 2
        assert len(rest) == 3
        assert {r.product_id for r in first + rest} == {f"prod-{n}" for n in range(5)}

    def test_newest_first(self):
        for n in range(3):
            _create(f"prod-{n}", 1)

        records, _ = _repo().list_page()
        created = [r.created_at for r in records]
        assert created == sorted(created, reverse=True)
