"""Inbound cross-domain event handler — Catalogue reacts to Inventory events.

Listens for ProductStockLevelChanged and refreshes the product's (or the
matching variation's) denormalized stock fields.

A failure is logged and written to the SyncFailure log; the refresh runs in
this handler's own unit of work so that row is kept.

Cross-domain events are imported from shared.events.inventory and registered
as external events via catalogue.register_external_event().
"""

import structlog
from protean.utils.mixins import handle
from shared.events.inventory import ProductStockLevelChanged

from catalogue.domain import catalogue
from catalogue.product.inventory_sync import SyncInventoryToProduct, sync_inventory_to_product
from catalogue.product.product import Product
from catalogue.projections.sync_failures import record_sync_failure

logger = structlog.get_logger(__name__)

# Register external events so Protean can deserialize them
catalogue.register_external_event(ProductStockLevelChanged, "Inventory.ProductStockLevelChanged.v1")

INVENTORY_TO_PRODUCT = "inventory_to_product"


@catalogue.event_handler(part_of=Product, stream_category="inventory::stock_record")
class InventoryCatalogueEventHandler:
    """Reacts to Inventory domain events to refresh product stock fields."""

    @handle(ProductStockLevelChanged)
    def on_product_stock_level_changed(self, event: ProductStockLevelChanged) -> None:
        try:
            sync_inventory_to_product(
                SyncInventoryToProduct(
                    product_id=event.product_id,
                    variation_id=event.variation_id,
                    stock_quantity=event.stock_quantity,
                    status=event.status,
                    size=event.size,
                    warehouse_id=event.warehouse_id,
                    warehouse_stock=event.warehouse_stock,
                )
            )
        except Exception as exc:
            logger.error(
                "Inventory to product sync failed",
                product_id=str(event.product_id),
                variation_id=str(event.variation_id) if event.variation_id else None,
                error=str(exc),
                exc_info=True,
            )
            record_sync_failure(INVENTORY_TO_PRODUCT, str(event.product_id), event.to_dict(), exc)
