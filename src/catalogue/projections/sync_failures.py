"""SyncFailure — ledger refreshes that could not be applied to a product."""

import json
import uuid
from datetime import datetime

from protean.fields import DateTime, Identifier, String, Text
from protean.utils.globals import current_domain

from catalogue.domain import catalogue


@catalogue.projection
class SyncFailure:
    failure_id: Identifier(identifier=True, required=True)
    direction: String(required=True, max_length=30)
    product_id: Identifier()
    payload: Text()
    error: Text()
    occurred_at: DateTime(required=True)


def record_sync_failure(direction, product_id, payload, error):
    failure = SyncFailure(
        failure_id=str(uuid.uuid4()),
        direction=direction,
        product_id=product_id,
        payload=json.dumps(payload, default=str),
        error=str(error),
        occurred_at=datetime.now(),
    )
    current_domain.repository_for(SyncFailure).add(failure)
    return failure
