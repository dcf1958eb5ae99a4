"""Warehouse-to-warehouse stock transfer — command and handler.

Both stock records are changed and saved inside the handler's unit of work,
so a transfer either lands on both sides or on neither.
"""

import structlog
from protean import handle
from protean.exceptions import ObjectNotFoundError
from protean.fields import Identifier, Integer, Text
from protean.utils.globals import current_domain

from inventory.domain import inventory
from inventory.stock.exceptions import InvalidStockOperation
from inventory.stock.record import StockRecord

logger = structlog.get_logger(__name__)


@inventory.command(part_of="StockRecord")
class TransferStock:
    """Move stock from one record to its counterpart in another warehouse."""

    inventory_id = Identifier(required=True)
    to_warehouse = Identifier(required=True)
    quantity = Integer(required=True, min_value=1)
    notes = Text()


@inventory.command_handler(part_of=StockRecord)
class StockTransferHandler:
    @handle(TransferStock)
    def transfer_stock(self, command):
        repo = current_domain.repository_for(StockRecord)
        source = repo.get(command.inventory_id)

        if str(command.to_warehouse) == str(source.warehouse_id):
            raise InvalidStockOperation({"to_warehouse": ["Cannot transfer stock to the same warehouse"]})

        destination = repo.find_by_key(
            source.product_id,
            command.to_warehouse,
            variation_id=source.variation_id,
            size=source.size,
        )
        if destination is None:
            raise ObjectNotFoundError(
                f"No stock record for product {source.product_id} in warehouse {command.to_warehouse}"
            )

        # A transfer moves stock between warehouses without changing the product total
        total_stock = repo.total_stock_for(source.product_id, source.variation_id)

        source.transfer_out(destination, command.quantity, notes=command.notes)
        destination.receive_transfer(source, command.quantity, notes=command.notes)
        source.announce_product_level(total_stock)
        destination.announce_product_level(total_stock)

        repo.add(source)
        repo.add(destination)

        logger.info(
            "Stock transferred",
            from_inventory_id=str(source.id),
            to_inventory_id=str(destination.id),
            to_warehouse=str(command.to_warehouse),
            quantity=command.quantity,
        )
        return {"from": str(source.id), "to": str(destination.id)}
