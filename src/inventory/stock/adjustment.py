"""Stock adjustment — commands and handler."""

from protean import handle
from protean.fields import Identifier, Integer, String, Text
from protean.utils.globals import current_domain

from inventory.domain import inventory
from inventory.stock.record import StockRecord


@inventory.command(part_of="StockRecord")
class AdjustStock:
    """Change current stock by a signed quantity."""

    inventory_id = Identifier(required=True)
    quantity = Integer(required=True)  # Negative for OUT movements
    type = String(max_length=3)  # IN, OUT; inferred from the sign when omitted
    reference_id = String(max_length=100)
    reference_type = String(max_length=50)
    notes = Text()


@inventory.command(part_of="StockRecord")
class SetReservedStock:
    """Set reserved stock to an absolute value."""

    inventory_id = Identifier(required=True)
    reserved_stock = Integer(default=0)


@inventory.command_handler(part_of=StockRecord)
class StockAdjustmentHandler:
    @handle(AdjustStock)
    def adjust_stock(self, command):
        repo = current_domain.repository_for(StockRecord)
        record = repo.get(command.inventory_id)
        record.adjust(
            quantity=command.quantity,
            movement_type=command.type,
            reference_id=command.reference_id,
            reference_type=command.reference_type,
            notes=command.notes,
        )
        record.announce_product_level(repo.total_stock_with(record))
        repo.add(record)

    @handle(SetReservedStock)
    def set_reserved_stock(self, command):
        repo = current_domain.repository_for(StockRecord)
        record = repo.get(command.inventory_id)
        record.set_reserved(command.reserved_stock)
        repo.add(record)
