"""Inventory → product sync — command and handler."""

import structlog
from protean import handle
from protean.fields import Identifier, Integer, String
from protean.utils.globals import current_domain

from catalogue.domain import catalogue
from catalogue.product.product import Product

logger = structlog.get_logger(__name__)


@catalogue.command(part_of="Product")
class SyncInventoryToProduct:
    """Refresh a product's (or variation's) denormalized stock from the ledger."""

    product_id: Identifier(required=True)
    variation_id: Identifier()
    stock_quantity: Integer(default=0)
    status: String(required=True, max_length=20)
    size: String(max_length=20)
    warehouse_id: Identifier()
    warehouse_stock: Integer()


def sync_inventory_to_product(command):
    """Apply a SyncInventoryToProduct. Returns True if the product changed."""
    repo = current_domain.repository_for(Product)
    product = repo.get(command.product_id)

    if not product.manage_stock:
        logger.debug("Product does not manage stock, skipping sync", product_id=str(product.id))
        return False

    changed = product.apply_inventory_level(
        stock_quantity=command.stock_quantity,
        status=command.status,
        variation_id=command.variation_id,
        size=command.size,
        warehouse_id=command.warehouse_id,
        warehouse_stock=command.warehouse_stock,
    )
    if changed:
        repo.add(product)
    return changed


@catalogue.command_handler(part_of=Product)
class InventorySyncHandler:
    @handle(SyncInventoryToProduct)
    def sync_inventory_to_product(self, command):
        return sync_inventory_to_product(command)
