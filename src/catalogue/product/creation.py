"""Product creation — command and handler."""

from protean import handle
from protean.fields import Boolean, Integer, String, Text
from protean.utils.globals import current_domain

from catalogue.domain import catalogue
from catalogue.product.product import DuplicateProduct, Product


@catalogue.command(part_of="Product")
class CreateProduct:
    name: String(required=True, max_length=255)
    slug: String(required=True, max_length=200)
    sku: String(required=True, max_length=50)
    description: Text()
    product_type: String(max_length=20)
    status: String(max_length=20)
    manage_stock: Boolean(default=True)
    allow_backorders: Boolean(default=False)
    warehouse_id: String(max_length=50)
    reorder_point: Integer(default=10)
    stock_quantity: Integer(default=0)
    size_inventory: Text()  # JSON: {"S": 10, "M": 0}


@catalogue.command_handler(part_of=Product)
class CreateProductHandler:
    @handle(CreateProduct)
    def create_product(self, command):
        repo = current_domain.repository_for(Product)
        if repo.find_by_slug(command.slug) is not None:
            raise DuplicateProduct({"slug": [f"Product with slug '{command.slug}' already exists"]})
        if repo.find_by_sku(command.sku) is not None:
            raise DuplicateProduct({"sku": [f"Product with SKU '{command.sku}' already exists"]})

        product = Product.create(
            name=command.name,
            slug=command.slug,
            sku=command.sku,
            description=command.description,
            product_type=command.product_type,
            status=command.status,
            manage_stock=command.manage_stock if command.manage_stock is not None else True,
            allow_backorders=command.allow_backorders or False,
            warehouse_id=command.warehouse_id,
            reorder_point=command.reorder_point if command.reorder_point is not None else 10,
            stock_quantity=command.stock_quantity or 0,
            size_inventory=command.size_inventory,
        )
        repo.add(product)
        return str(product.id)
