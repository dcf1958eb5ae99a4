"""Repository for the Product aggregate."""

from catalogue.domain import catalogue
from catalogue.product.product import Product


@catalogue.repository(part_of=Product)
class ProductRepository:
    def find_by_slug(self, slug: str) -> Product | None:
        items = self._dao.query.filter(slug=slug).all().items
        return items[0] if items else None

    def find_by_sku(self, sku: str) -> Product | None:
        items = self._dao.query.filter(sku=sku).all().items
        return items[0] if items else None
