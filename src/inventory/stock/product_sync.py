"""Product → inventory sync — command and handler.

Stock lines carry absolute quantities, so re-running a sync with the same
product state leaves every record (including its version) untouched. A line
whose quantity the merchant did not write in this change ("set": false) only
creates a missing record; existing records keep the ledger's stock.
Records created or changed here are not announced back to the catalogue.
"""

import json

import structlog
from protean import handle
from protean.fields import Boolean, Identifier, Integer, Text
from protean.utils.globals import current_domain

from inventory.domain import inventory
from inventory.stock.record import StockRecord, normalize_key_part

logger = structlog.get_logger(__name__)


@inventory.command(part_of="StockRecord")
class SyncProductStock:
    """Bring a product's stock records in line with its stock fields."""

    product_id = Identifier(required=True)
    warehouse_id = Identifier()
    manage_stock = Boolean(default=True)
    allow_backorders = Boolean(default=False)
    reorder_point = Integer()
    stock_lines = Text()  # JSON: [{variation_id, size, quantity, set}]


def _parse_lines(stock_lines):
    lines = json.loads(stock_lines) if stock_lines else []
    parsed = []
    for line in lines:
        key = (normalize_key_part(line.get("variation_id")), normalize_key_part(line.get("size")))
        parsed.append((key, max(int(line.get("quantity") or 0), 0), line.get("set", True) is not False))
    return parsed


def sync_product_stock(command):
    """Apply a SyncProductStock to the product's records in its warehouse.

    Every record is built and checked before the first one is written.
    """
    if command.manage_stock is False:
        logger.debug("Product does not manage stock, skipping sync", product_id=str(command.product_id))
        return {"created": 0, "updated": 0, "deleted": 0}

    custom = current_domain.config.get("custom", {}) or {}
    warehouse_id = command.warehouse_id or custom.get("default_warehouse_id", "main")
    lines = _parse_lines(command.stock_lines)
    allow_backorders = command.allow_backorders or False

    repo = current_domain.repository_for(StockRecord)
    existing = repo.for_product_in_warehouse(command.product_id, warehouse_id)
    by_key = {(normalize_key_part(r.variation_id), normalize_key_part(r.size)): r for r in existing}

    created, updated = [], []
    listed = set()
    for key, quantity, is_set in lines:
        listed.add(key)
        record = by_key.get(key)
        if record is None:
            created.append(
                StockRecord.create(
                    product_id=command.product_id,
                    variation_id=key[0],
                    size=key[1],
                    warehouse_id=warehouse_id,
                    current_stock=quantity,
                    reorder_point=command.reorder_point if command.reorder_point is not None else 10,
                    allow_backorders=allow_backorders,
                )
            )
        elif record.sync_from_product(
            quantity if is_set else None,
            allow_backorders,
            reorder_point=command.reorder_point,
        ):
            updated.append(record)

    dropped = [record for key, record in by_key.items() if key not in listed and key[1] is not None]

    for record in created + updated:
        repo.add(record)
    for record in dropped:
        repo._dao.delete(record)

    logger.info(
        "Product stock synced to inventory",
        product_id=str(command.product_id),
        warehouse_id=str(warehouse_id),
        created=len(created),
        updated=len(updated),
        deleted=len(dropped),
    )
    return {"created": len(created), "updated": len(updated), "deleted": len(dropped)}


@inventory.command_handler(part_of=StockRecord)
class ProductStockSyncHandler:
    @handle(SyncProductStock)
    def sync_product_stock(self, command):
        return sync_product_stock(command)
