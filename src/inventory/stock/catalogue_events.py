"""Inbound cross-domain event handler — Inventory reacts to Catalogue events.

Listens for ProductStockUpdated from the Catalogue domain and brings the
product's stock records in line with its stock fields.

Cross-domain events are imported from shared.events.catalogue and registered
as external events via inventory.register_external_event().

A failed sync never reaches the product write that triggered it: the error
is logged and written to the SyncFailure log instead. The sync runs in this
handler's own unit of work and writes nothing until every line checks out,
so a failure leaves only the SyncFailure row.
"""

import structlog
from protean.utils.mixins import handle
from shared.events.catalogue import ProductStockUpdated

from inventory.domain import inventory
from inventory.projections.sync_failures import record_sync_failure
from inventory.stock.exceptions import StockSyncFailure
from inventory.stock.product_sync import SyncProductStock, sync_product_stock
from inventory.stock.record import StockRecord

logger = structlog.get_logger(__name__)

# Register external events so Protean can deserialize them
inventory.register_external_event(ProductStockUpdated, "Catalogue.ProductStockUpdated.v1")

PRODUCT_TO_INVENTORY = "product_to_inventory"


@inventory.event_handler(part_of=StockRecord, stream_category="catalogue::product")
class CatalogueInventoryEventHandler:
    """Reacts to Catalogue domain events to keep stock records in sync."""

    @handle(ProductStockUpdated)
    def on_product_stock_updated(self, event: ProductStockUpdated) -> None:
        logger.info(
            "Syncing product stock to inventory",
            product_id=str(event.product_id),
            changed_fields=event.changed_fields,
        )
        try:
            sync_product_stock(
                SyncProductStock(
                    product_id=event.product_id,
                    warehouse_id=event.warehouse_id,
                    manage_stock=event.manage_stock,
                    allow_backorders=event.allow_backorders,
                    reorder_point=event.reorder_point,
                    stock_lines=event.stock_lines,
                )
            )
        except Exception as exc:
            failure = StockSyncFailure(PRODUCT_TO_INVENTORY, str(event.product_id), exc)
            logger.error(
                "Product to inventory sync failed",
                product_id=str(event.product_id),
                error=str(failure),
                exc_info=True,
            )
            record_sync_failure(PRODUCT_TO_INVENTORY, str(event.product_id), event.to_dict(), failure)
