"""SyncFailure — dead-letter log of product/inventory sync steps that failed."""

import json
import uuid
from datetime import UTC, datetime

from protean.fields import DateTime, Identifier, String, Text
from protean.utils.globals import current_domain

from inventory.domain import inventory


@inventory.projection
class SyncFailure:
    failure_id = Identifier(identifier=True, required=True)
    direction = String(required=True, max_length=30)  # product_to_inventory, inventory_to_product
    product_id = Identifier()
    payload = Text()  # JSON of the triggering event
    error = Text()
    occurred_at = DateTime(required=True)


def record_sync_failure(direction, product_id, payload, error):
    failure = SyncFailure(
        failure_id=str(uuid.uuid4()),
        direction=direction,
        product_id=product_id,
        payload=json.dumps(payload, default=str),
        error=str(error),
        occurred_at=datetime.now(UTC),
    )
    current_domain.repository_for(SyncFailure).add(failure)
    return failure


def sync_failures_for(product_id=None):
    repo = current_domain.repository_for(SyncFailure)
    if product_id is None:
        return repo._dao.query.all().items
    return repo._dao.query.filter(product_id=str(product_id)).all().items
