"""Cross-domain event contracts for Catalogue domain events.

These classes define the event shape for consumption by other domains
(the Inventory domain keeps its stock records in line with product stock
fields). They are registered as external events via
domain.register_external_event() with matching __type__ strings so
Protean's stream deserialization works correctly.

The source-of-truth events are in src/catalogue/product/events.py.
"""

from protean.core.event import BaseEvent
from protean.fields import Boolean, DateTime, Identifier, Integer, Text


class ProductStockUpdated(BaseEvent):
    """A product was created, or an update touched its stock fields."""

    __version__ = 1

    product_id = Identifier(required=True)
    manage_stock = Boolean(default=True)
    allow_backorders = Boolean(default=False)
    warehouse_id = Identifier(required=True)
    reorder_point = Integer(default=10)
    stock_lines = Text(required=True)  # JSON: [{variation_id, size, quantity, set}]
    changed_fields = Text()  # JSON: list of field names
    updated_at = DateTime(required=True)
