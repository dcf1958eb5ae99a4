"""Bounded retry for commands that lose an optimistic-concurrency race.

Repositories reject stale writes with ExpectedVersionError. A command that
hits one is re-processed from scratch (reloading the aggregate) a bounded
number of times with exponential backoff and jitter, then the error is
re-raised for the HTTP layer to turn into a 409.

Backoff uses asyncio.sleep, so an async route waiting to retry does not hold
up the event loop.

Usage:
    from shared.retry import process_with_retry

    result = await process_with_retry(AdjustStock(inventory_id=..., quantity=-3))
"""

import asyncio
import random
from dataclasses import dataclass

import structlog
from protean.exceptions import ExpectedVersionError
from protean.utils.globals import current_domain

from shared.errors import storage_guard

logger = structlog.get_logger(__name__)


@dataclass
class RetryConfig:
    """Configuration for retry behavior"""

    max_attempts: int = 3
    base_delay: float = 0.05  # seconds
    max_delay: float = 1.0  # seconds
    exponential_base: float = 2.0
    jitter: bool = True

    def get_delay(self, attempt: int) -> float:
        """Calculate delay for a given attempt number"""
        delay = min(self.base_delay * (self.exponential_base ** (attempt - 1)), self.max_delay)
        if self.jitter:
            delay *= 0.5 + random.random()
        return delay

    @classmethod
    def from_domain(cls, domain) -> "RetryConfig":
        """Read `command_retry_attempts` / `command_retry_base_delay` from the domain's [custom] config."""
        custom = domain.config.get("custom", {}) or {}
        return cls(
            max_attempts=int(custom.get("command_retry_attempts", cls.max_attempts)),
            base_delay=float(custom.get("command_retry_base_delay", cls.base_delay)),
        )


def _retry_delay(command, config: RetryConfig, attempt: int, exc: ExpectedVersionError) -> float | None:
    """Backoff before the next attempt, or None once attempts are used up."""
    if attempt >= config.max_attempts:
        logger.warning(
            "Version conflict retries exhausted",
            command=command.__class__.__name__,
            attempts=attempt,
            error=str(exc),
        )
        return None
    delay = config.get_delay(attempt)
    logger.info(
        "Version conflict, retrying command",
        command=command.__class__.__name__,
        attempt=attempt,
        delay=round(delay, 3),
    )
    return delay


async def process_with_retry(command, config: RetryConfig | None = None):
    """Process `command` (synchronously, in this request), retrying on version conflicts."""
    config = config or RetryConfig.from_domain(current_domain)

    attempt = 1
    while True:
        try:
            with storage_guard():
                return current_domain.process(command, asynchronous=False)
        except ExpectedVersionError as exc:
            delay = _retry_delay(command, config, attempt, exc)
            if delay is None:
                raise
            await asyncio.sleep(delay)
            attempt += 1
