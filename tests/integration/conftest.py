"""Fixtures for cross-domain tests of the product/inventory stock bridge.

Each domain runs in its own context. Tests hand events across by
switching contexts, standing in for the Engine that delivers them in
production.
"""

import os

import pytest


@pytest.fixture(scope="session")
def _inventory_domain(request):
    os.environ["PROTEAN_ENV"] = request.config.option.env

    from inventory.domain import inventory

    inventory.init()
    return inventory


@pytest.fixture(scope="session")
def _catalogue_domain(request):
    os.environ["PROTEAN_ENV"] = request.config.option.env

    from catalogue.domain import catalogue

    catalogue.init()
    return catalogue


@pytest.fixture(scope="session", autouse=True)
def setup_databases(_inventory_domain, _catalogue_domain):
    """Create database schemas for both domains."""
    from shared.db import drop_db, setup_db

    setup_db(_inventory_domain)
    setup_db(_catalogue_domain)

    yield

    drop_db(_inventory_domain)
    drop_db(_catalogue_domain)


def _reset(domain):
    with domain.domain_context():
        for _, provider in domain.providers.items():
            provider._data_reset()

        for _, broker in domain.brokers.items():
            broker._data_reset()

        domain.event_store.store._data_reset()


@pytest.fixture(autouse=True)
def _clean_domains(_inventory_domain, _catalogue_domain):
    yield

    _reset(_inventory_domain)
    _reset(_catalogue_domain)
