"""Stock record creation — command and handler."""

from protean import handle
from protean.fields import Boolean, Identifier, Integer, String
from protean.utils.globals import current_domain

from inventory.domain import inventory
from inventory.stock.exceptions import DuplicateStockRecord
from inventory.stock.record import StockRecord


@inventory.command(part_of="StockRecord")
class CreateStockRecord:
    """Open a stock record for a product/variation/size at a warehouse."""

    product_id = Identifier(required=True)
    variation_id = Identifier()
    size = String(max_length=20)
    warehouse_id = Identifier(required=True)
    current_stock = Integer(default=0)
    reserved_stock = Integer(default=0)
    reorder_point = Integer(default=10)
    reorder_quantity = Integer(default=50)
    max_stock = Integer()
    allow_backorders = Boolean(default=False)


@inventory.command_handler(part_of=StockRecord)
class CreateStockRecordHandler:
    @handle(CreateStockRecord)
    def create_stock_record(self, command):
        repo = current_domain.repository_for(StockRecord)

        existing = repo.find_by_key(
            command.product_id,
            command.warehouse_id,
            variation_id=command.variation_id,
            size=command.size,
        )
        if existing is not None:
            raise DuplicateStockRecord(
                {"stock_record": [f"Stock record already exists for this product and warehouse ({existing.id})"]}
            )

        record = StockRecord.create(
            product_id=command.product_id,
            variation_id=command.variation_id,
            size=command.size,
            warehouse_id=command.warehouse_id,
            current_stock=command.current_stock or 0,
            reserved_stock=command.reserved_stock or 0,
            reorder_point=command.reorder_point if command.reorder_point is not None else 10,
            reorder_quantity=command.reorder_quantity if command.reorder_quantity is not None else 50,
            max_stock=command.max_stock,
            allow_backorders=command.allow_backorders or False,
        )
        record.announce_product_level(repo.total_stock_with(record))
        repo.add(record)
        return str(record.id)
