"""Product stock management — commands and handler.

Each write that actually changes a stock field raises ProductStockUpdated
for the inventory context.
"""

from protean import handle
from protean.fields import Boolean, Float, Identifier, Integer, String, Text
from protean.utils.globals import current_domain

from catalogue.domain import catalogue
from catalogue.product.product import Product


@catalogue.command(part_of="Product")
class UpdateProductStock:
    product_id: Identifier(required=True)
    stock_quantity: Integer()
    size_inventory: Text()  # JSON: {"S": 10, "M": 0}
    allow_backorders: Boolean()
    manage_stock: Boolean()
    warehouse_id: String(max_length=50)
    reorder_point: Integer()


@catalogue.command(part_of="Product")
class AddVariation:
    product_id: Identifier(required=True)
    sku: String(required=True, max_length=50)
    price: Float(required=True)
    sale_price: Float()
    attributes: Text()
    stock_quantity: Integer(default=0)


@catalogue.command(part_of="Product")
class UpdateVariationStock:
    product_id: Identifier(required=True)
    variation_id: Identifier(required=True)
    stock_quantity: Integer(default=0)


@catalogue.command_handler(part_of=Product)
class ManageProductStockHandler:
    @handle(UpdateProductStock)
    def update_stock(self, command):
        repo = current_domain.repository_for(Product)
        product = repo.get(command.product_id)
        changed = product.update_stock(
            stock_quantity=command.stock_quantity,
            size_inventory=command.size_inventory,
            allow_backorders=command.allow_backorders,
            manage_stock=command.manage_stock,
            warehouse_id=command.warehouse_id,
            reorder_point=command.reorder_point,
        )
        if changed:
            repo.add(product)
        return changed

    @handle(AddVariation)
    def add_variation(self, command):
        repo = current_domain.repository_for(Product)
        product = repo.get(command.product_id)
        variation = product.add_variation(
            sku=command.sku,
            price=command.price,
            sale_price=command.sale_price,
            attributes=command.attributes,
            stock_quantity=command.stock_quantity or 0,
        )
        repo.add(product)
        return str(variation.id)

    @handle(UpdateVariationStock)
    def update_variation_stock(self, command):
        repo = current_domain.repository_for(Product)
        product = repo.get(command.product_id)
        if product.update_variation_stock(command.variation_id, command.stock_quantity):
            repo.add(product)
