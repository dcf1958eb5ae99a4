"""Repository for the StockRecord aggregate — key lookups and ledger reads."""

from inventory.domain import inventory
from inventory.stock.record import StockRecord, normalize_key_part
from inventory.stock.status import StockStatus


@inventory.repository(part_of=StockRecord)
class StockRecordRepository:
    """Ledger queries on top of the standard CRUD operations.

    Nullable key parts (variation_id, size) are matched in Python after
    narrowing by product and warehouse, so "absent" compares equal across
    providers that store it as NULL or as an empty string.
    """

    def for_product(self, product_id) -> list[StockRecord]:
        """All records for a product, across warehouses, variations and sizes."""
        return self._dao.query.filter(product_id=str(product_id)).all().items

    def for_product_in_warehouse(self, product_id, warehouse_id) -> list[StockRecord]:
        return self._dao.query.filter(product_id=str(product_id), warehouse_id=str(warehouse_id)).all().items

    def find_by_key(self, product_id, warehouse_id, variation_id=None, size=None) -> StockRecord | None:
        """The record for an exact (product, variation, warehouse, size) key, if any."""
        variation_id = normalize_key_part(variation_id)
        size = normalize_key_part(size)
        for record in self.for_product_in_warehouse(product_id, warehouse_id):
            if normalize_key_part(record.variation_id) == variation_id and normalize_key_part(record.size) == size:
                return record
        return None

    def find_by_product(self, product_id, size=None) -> list[StockRecord]:
        """Records for a product, optionally narrowed to one size."""
        records = self.for_product(product_id)
        size = normalize_key_part(size)
        if size is not None:
            records = [r for r in records if normalize_key_part(r.size) == size]
        return records

    def total_stock_for(self, product_id, variation_id=None) -> int:
        """Current stock summed over every warehouse and size of a product/variation."""
        variation_id = normalize_key_part(variation_id)
        return sum(
            record.current_stock or 0
            for record in self.for_product(product_id)
            if normalize_key_part(record.variation_id) == variation_id
        )

    def total_stock_with(self, record) -> int:
        """Product/variation total as it will be once `record`'s pending state is saved."""
        variation_id = normalize_key_part(record.variation_id)
        others = sum(
            r.current_stock or 0
            for r in self.for_product(record.product_id)
            if normalize_key_part(r.variation_id) == variation_id and str(r.id) != str(record.id)
        )
        return others + (record.current_stock or 0)

    def list_page(self, offset=0, limit=20) -> tuple[list[StockRecord], int]:
        """One page of records, newest first, plus the total count."""
        records = sorted(
            self._dao.query.all().items,
            key=lambda r: r.created_at.isoformat() if r.created_at else "",
            reverse=True,
        )
        return records[offset : offset + limit], len(records)

    def low_stock(self) -> list[StockRecord]:
        """Records at or below their reorder point."""
        return [r for r in self._dao.query.all().items if _is_low(r)]

    def out_of_stock(self) -> list[StockRecord]:
        return [r for r in self._dao.query.all().items if (r.current_stock or 0) == 0]

    def stats(self) -> dict:
        records = self._dao.query.all().items
        total = len(records)
        out_of_stock = sum(1 for r in records if (r.current_stock or 0) == 0)
        return {
            "total": total,
            "low_stock": sum(1 for r in records if _is_low(r)),
            "out_of_stock": out_of_stock,
            "in_stock": total - out_of_stock,
            "discontinued": sum(1 for r in records if r.status == StockStatus.DISCONTINUED.value),
        }


def _is_low(record):
    return (record.current_stock or 0) <= (record.reorder_point or 0)
