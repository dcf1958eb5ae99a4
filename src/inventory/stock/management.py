"""Stock record management — settings update and admin delete."""

import structlog
from protean import handle
from protean.fields import Boolean, Identifier, Integer, Text
from protean.utils.globals import current_domain

from inventory.domain import inventory
from inventory.stock.record import StockRecord

logger = structlog.get_logger(__name__)


@inventory.command(part_of="StockRecord")
class UpdateStockRecord:
    """Update reorder settings, the discontinued flag, or set stock absolutely."""

    inventory_id = Identifier(required=True)
    current_stock = Integer()
    reorder_point = Integer()
    reorder_quantity = Integer()
    max_stock = Integer()
    discontinued = Boolean()
    notes = Text()


@inventory.command(part_of="StockRecord")
class DeleteStockRecord:
    """Hard-delete a stock record."""

    inventory_id = Identifier(required=True)


@inventory.command_handler(part_of=StockRecord)
class StockRecordManagementHandler:
    @handle(UpdateStockRecord)
    def update_stock_record(self, command):
        repo = current_domain.repository_for(StockRecord)
        record = repo.get(command.inventory_id)
        previous_stock = record.current_stock
        previous_status = record.status

        if command.current_stock is not None:
            record.set_stock(command.current_stock, notes=command.notes)

        if any(
            value is not None
            for value in (command.reorder_point, command.reorder_quantity, command.max_stock, command.discontinued)
        ):
            record.update_settings(
                reorder_point=command.reorder_point,
                reorder_quantity=command.reorder_quantity,
                max_stock=command.max_stock,
                discontinued=command.discontinued,
            )

        if record.current_stock != previous_stock or record.status != previous_status:
            record.announce_product_level(repo.total_stock_with(record))
        repo.add(record)

    @handle(DeleteStockRecord)
    def delete_stock_record(self, command):
        repo = current_domain.repository_for(StockRecord)
        record = repo.get(command.inventory_id)

        remaining = repo.total_stock_with(record) - (record.current_stock or 0)
        record.announce_product_level(remaining, warehouse_stock=0)
        repo.add(record)
        repo._dao.delete(record)
        logger.info(
            "Stock record deleted",
            inventory_id=str(record.id),
            product_id=str(record.product_id),
            warehouse_id=str(record.warehouse_id),
        )
