"""Cross-domain event contracts for Inventory domain events.

These classes define the event shape for consumption by other domains
(the Catalogue domain refreshes the denormalized stock fields on products).
They are registered as external events via domain.register_external_event()
with matching __type__ strings so Protean's stream deserialization works
correctly.

The source-of-truth events are in src/inventory/stock/events.py.
"""

from protean.core.event import BaseEvent
from protean.fields import DateTime, Identifier, Integer, String


class ProductStockLevelChanged(BaseEvent):
    """Aggregate stock for a product (or one of its variations) changed."""

    __version__ = 1

    product_id = Identifier(required=True)
    variation_id = Identifier()
    stock_quantity = Integer(default=0)
    status = String(required=True)
    changed_at = DateTime(required=True)
    size = String(max_length=20)
    warehouse_id = Identifier()
    warehouse_stock = Integer()
