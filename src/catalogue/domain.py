"""Catalogue bounded context — products and their denormalized stock fields.

Products own size inventory and variation stock as entered by merchants;
the stock ledger in the inventory context is the source of truth for the
stock_quantity/stock_status/in_stock cache (inventory-to-product sync).
"""

import structlog
from protean.domain import Domain
from shared.logging import configure_logging

configure_logging(log_dir="logs", log_file_prefix="stockroom")

logger = structlog.get_logger(__name__)

# Domain Composition Root
catalogue = Domain(name="catalogue")
