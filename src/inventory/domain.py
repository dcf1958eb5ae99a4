"""Inventory bounded context — Stock Ledger, Movements and Warehouses.

Tracks stock per product/variation/size/warehouse, keeps an append-only
movement log, moves stock between warehouses, and mirrors stock held on
catalogue products (product-to-inventory sync).
"""

import structlog
from protean.domain import Domain
from shared.logging import configure_logging

configure_logging(log_dir="logs", log_file_prefix="stockroom")

logger = structlog.get_logger(__name__)

# Domain Composition Root
inventory = Domain(name="inventory")
