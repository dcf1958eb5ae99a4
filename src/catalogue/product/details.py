"""Product details management — command and handler."""

from protean import handle
from protean.fields import Identifier, String, Text
from protean.utils.globals import current_domain

from catalogue.domain import catalogue
from catalogue.product.product import DuplicateProduct, Product


@catalogue.command(part_of="Product")
class UpdateProductDetails:
    product_id: Identifier(required=True)
    name: String(max_length=255)
    slug: String(max_length=200)
    description: Text()
    status: String(max_length=20)


@catalogue.command_handler(part_of=Product)
class ManageProductDetailsHandler:
    @handle(UpdateProductDetails)
    def update_details(self, command):
        repo = current_domain.repository_for(Product)
        product = repo.get(command.product_id)

        if command.slug is not None and command.slug != product.slug:
            existing = repo.find_by_slug(command.slug)
            if existing is not None and str(existing.id) != str(product.id):
                raise DuplicateProduct({"slug": [f"Product with slug '{command.slug}' already exists"]})

        product.update_details(
            name=command.name,
            slug=command.slug,
            description=command.description,
            status=command.status,
        )
        repo.add(product)
