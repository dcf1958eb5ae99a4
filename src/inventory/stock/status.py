"""Stock status — the single canonical status derivation for stock records.

    out_of_stock:  nothing on hand (unless backorders are allowed)
    low_stock:     on hand, but at or below the reorder point
    in_stock:      above the reorder point, or backorderable
    discontinued:  set explicitly, never derived
"""

from enum import Enum


class StockStatus(Enum):
    IN_STOCK = "in_stock"
    LOW_STOCK = "low_stock"
    OUT_OF_STOCK = "out_of_stock"
    DISCONTINUED = "discontinued"


def derive_status(current_stock: int, reorder_point: int, allow_backorders: bool = False) -> str:
    """Map a stock count to its status value."""
    if current_stock <= 0:
        if allow_backorders:
            return StockStatus.IN_STOCK.value
        return StockStatus.OUT_OF_STOCK.value

    if current_stock <= (reorder_point or 0):
        return StockStatus.LOW_STOCK.value

    return StockStatus.IN_STOCK.value
