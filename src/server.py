"""Protean Engine runner for Stockroom domains.

Starts Engine workers that process events asynchronously:
- OutboxProcessor: polls outbox table, publishes events to Redis Streams
- StreamSubscriptions: reads Redis Streams, invokes projectors and event handlers

The product/inventory sync bridge only runs when both engines are up.

Usage:
    python src/server.py                     # Run both domain engines
    python src/server.py --domain inventory  # Run only inventory engine
    python src/server.py --domain catalogue  # Run only catalogue engine
"""

import argparse
import asyncio

import structlog
from protean.server.engine import Engine

from shared.logging import configure_logging

logger = structlog.get_logger(__name__)

DOMAINS = ["inventory", "catalogue"]


def _get_domain(name):
    """Import and initialize a domain by name."""
    if name == "inventory":
        from inventory.domain import inventory

        inventory.init()
        return inventory
    elif name == "catalogue":
        from catalogue.domain import catalogue

        catalogue.init()
        return catalogue
    else:
        raise ValueError(f"Unknown domain: {name}")


async def run(domain_names):
    engines = []
    for name in domain_names:
        domain = _get_domain(name)
        engines.append(Engine(domain))
        logger.info("Engine starting", domain=name)

    await asyncio.gather(*(engine.run() for engine in engines))


def main():
    parser = argparse.ArgumentParser(description="Stockroom Engine runner")
    parser.add_argument(
        "--domain",
        choices=DOMAINS,
        help="Run a single domain engine (default: run all)",
    )
    args = parser.parse_args()

    configure_logging()
    domain_names = [args.domain] if args.domain else DOMAINS

    asyncio.run(run(domain_names))


if __name__ == "__main__":
    main()
