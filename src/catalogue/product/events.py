"""Domain events for the Product aggregate."""

from protean.fields import Boolean, DateTime, Float, Identifier, Integer, String, Text

from catalogue.domain import catalogue


@catalogue.event(part_of="Product")
class ProductCreated:
    """A new product was added to the catalogue."""

    __version__ = 1

    product_id: Identifier(required=True)
    name: String(required=True)
    slug: String(required=True)
    sku: String(required=True)
    product_type: String(required=True)
    status: String(required=True)
    created_at: DateTime(required=True)


@catalogue.event(part_of="Product")
class ProductDetailsUpdated:
    """Name, slug, description or status of a product changed."""

    __version__ = 1

    product_id: Identifier(required=True)
    name: String(required=True)
    slug: String(required=True)
    description: Text()
    status: String(required=True)
    updated_at: DateTime(required=True)


@catalogue.event(part_of="Product")
class VariationAdded:
    """A new purchasable variation was added to a product."""

    __version__ = 1

    product_id: Identifier(required=True)
    variation_id: Identifier(required=True)
    sku: String(required=True)
    price: Float(required=True)
    sale_price: Float()
    stock_quantity: Integer(default=0)
    created_at: DateTime(required=True)


# Cross-cutting event consumed by the Inventory domain (shared.events.catalogue)


@catalogue.event(part_of="Product")
class ProductStockUpdated:
    """A product was created, or an update touched its stock fields."""

    __version__ = 1

    product_id: Identifier(required=True)
    manage_stock: Boolean(default=True)
    allow_backorders: Boolean(default=False)
    warehouse_id: Identifier(required=True)
    reorder_point: Integer(default=10)
    stock_lines: Text(required=True)  # JSON: [{variation_id, size, quantity, set}]
    changed_fields: Text()  # JSON: list of field names
    updated_at: DateTime(required=True)


@catalogue.event(part_of="Product")
class ProductStockSynced:
    """Denormalized stock fields were refreshed from the stock ledger."""

    __version__ = 1

    product_id: Identifier(required=True)
    variation_id: Identifier()
    stock_quantity: Integer(default=0)
    stock_status: String(required=True)
    in_stock: Boolean(default=False)
    synced_at: DateTime(required=True)
    size: String(max_length=20)
