"""Typed failures raised by the stock ledger and transfer coordinator.

Ledger failures subclass Protean's ValidationError so they carry field-keyed
messages and map to HTTP 400 through the FastAPI integration.
"""

from protean.exceptions import ValidationError


class DuplicateStockRecord(ValidationError):
    """A stock record already exists for the product/variation/size/warehouse key."""


class InvalidStockOperation(ValidationError):
    """The requested change would leave the ledger in an invalid state."""


class InsufficientStock(InvalidStockOperation):
    """The source record holds less stock than requested."""


class StockSyncFailure(Exception):
    """Product/inventory synchronization failed. Logged and dead-lettered, never raised to callers."""

    def __init__(self, direction, product_id, cause):
        self.direction = direction
        self.product_id = product_id
        self.cause = cause
        super().__init__(f"{direction} sync failed for product {product_id}: {cause}")

