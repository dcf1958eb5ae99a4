"""Per-user state tracking for Locust load test scenarios.

Each Locust user keeps its own state. State tracks ids returned by creation
endpoints so follow-up operations can reference them.
"""

from dataclasses import dataclass, field


@dataclass
class StockState:
    """Tracks a single stock record through its journey."""

    warehouse_id: str | None = None
    inventory_id: str | None = None
    current_stock: int = 0


@dataclass
class TransferState:
    """Tracks a source/destination pair for transfer journeys."""

    source_warehouse_id: str | None = None
    destination_warehouse_id: str | None = None
    source_inventory_id: str | None = None
    source_stock: int = 0


@dataclass
class ProductState:
    """Tracks a product and the sizes it currently carries."""

    product_id: str | None = None
    sizes: dict[str, int] = field(default_factory=dict)
    variation_ids: list[str] = field(default_factory=list)
