"""Catalogue load test scenarios.

Product stock journeys that feed the product/inventory sync bridge. The
inventory side only catches up when the Engine is running (see src/server.py),
so the ledger check is a read, not an assertion.
"""

import random

from locust import HttpUser, SequentialTaskSet, between, task

from loadtests.data_generators import product_data, variation_data
from loadtests.helpers.response import extract_error_detail
from loadtests.helpers.state import ProductState


class SizedProductJourney(SequentialTaskSet):
    """Create sized product -> Restock sizes -> Drop a size -> Read ledger."""

    def on_start(self):
        self.state = ProductState()

    @task
    def create_product(self):
        payload = product_data(sized=True)
        with self.client.post("/products", json=payload, catch_response=True, name="POST /products") as resp:
            if resp.status_code == 201:
                self.state.product_id = resp.json()["product_id"]
                self.state.sizes = payload["size_inventory"]
            else:
                resp.failure(f"Create product failed: {resp.status_code}: {extract_error_detail(resp)}")
                self.interrupt()

    @task
    def restock_sizes(self):
        sizes = {size: qty + random.randint(1, 20) for size, qty in self.state.sizes.items()}
        self._put_sizes(sizes)

    @task
    def drop_a_size(self):
        if len(self.state.sizes) < 2:
            return
        sizes = dict(self.state.sizes)
        sizes.pop(random.choice(list(sizes)))
        self._put_sizes(sizes)

    @task
    def read_ledger(self):
        self.client.get(f"/inventory/product/{self.state.product_id}", name="GET /inventory/product/{id}")

    @task
    def done(self):
        self.interrupt()

    def _put_sizes(self, sizes):
        with self.client.put(
            f"/products/{self.state.product_id}/stock",
            json={"size_inventory": sizes},
            catch_response=True,
            name="PUT /products/{id}/stock",
        ) as resp:
            if resp.status_code == 200:
                self.state.sizes = resp.json()["size_inventory"]
            else:
                resp.failure(f"Update stock failed: {resp.status_code}: {extract_error_detail(resp)}")


class VariableProductJourney(SequentialTaskSet):
    """Create product -> Add variations -> Update a variation's stock."""

    def on_start(self):
        self.state = ProductState()

    @task
    def create_product(self):
        with self.client.post(
            "/products", json=product_data(sized=False), catch_response=True, name="POST /products"
        ) as resp:
            if resp.status_code == 201:
                self.state.product_id = resp.json()["product_id"]
            else:
                resp.failure(f"Create product failed: {extract_error_detail(resp)}")
                self.interrupt()

    @task
    def add_variations(self):
        for _ in range(random.randint(1, 3)):
            with self.client.post(
                f"/products/{self.state.product_id}/variations",
                json=variation_data(),
                catch_response=True,
                name="POST /products/{id}/variations",
            ) as resp:
                if resp.status_code == 201:
                    self.state.variation_ids.append(resp.json()["variation_id"])
                else:
                    resp.failure(f"Add variation failed: {extract_error_detail(resp)}")

    @task
    def update_variation_stock(self):
        if not self.state.variation_ids:
            self.interrupt()
        variation_id = random.choice(self.state.variation_ids)
        with self.client.put(
            f"/products/{self.state.product_id}/variations/{variation_id}/stock",
            json={"stock_quantity": random.randint(0, 30)},
            catch_response=True,
            name="PUT /products/{id}/variations/{vid}/stock",
        ) as resp:
            if resp.status_code != 200:
                resp.failure(f"Variation stock failed: {extract_error_detail(resp)}")

    @task
    def done(self):
        self.interrupt()


class CatalogueUser(HttpUser):
    """Locust user simulating merchandisers editing product stock.

    Weighted distribution:
    - 70% Sized products (the bulk of apparel catalogues)
    - 30% Variable products
    """

    wait_time = between(1.0, 3.0)
    tasks = {
        SizedProductJourney: 7,
        VariableProductJourney: 3,
    }
