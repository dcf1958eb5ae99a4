"""Inventory load test scenarios.

Stateful SequentialTaskSet journeys over the stock ledger: receiving and
selling against one record, moving stock between warehouses, and the
read-heavy dashboard queries.
"""

import random

from locust import HttpUser, SequentialTaskSet, between, task

from loadtests.data_generators import adjustment_data, stock_record_data, warehouse_data
from loadtests.helpers.response import extract_error_detail
from loadtests.helpers.state import StockState, TransferState


class ReceiveAndSellJourney(SequentialTaskSet):
    """Create Warehouse -> Create Stock Record -> Adjust x N -> Movements.

    Models a warehouse taking in a shipment and fulfilling sales from it.
    """

    def on_start(self):
        self.state = StockState()

    @task
    def create_warehouse(self):
        with self.client.post(
            "/warehouses", json=warehouse_data(), catch_response=True, name="POST /warehouses"
        ) as resp:
            if resp.status_code == 201:
                self.state.warehouse_id = resp.json()["warehouse_id"]
            else:
                resp.failure(f"Create warehouse failed: {resp.status_code}: {extract_error_detail(resp)}")
                self.interrupt()

    @task
    def create_stock_record(self):
        payload = stock_record_data(warehouse_id=self.state.warehouse_id, current_stock=100)
        with self.client.post("/inventory", json=payload, catch_response=True, name="POST /inventory") as resp:
            if resp.status_code == 201:
                self.state.inventory_id = resp.json()["inventory_id"]
                self.state.current_stock = 100
            else:
                resp.failure(f"Create stock record failed: {resp.status_code}: {extract_error_detail(resp)}")
                self.interrupt()

    @task
    def adjust_stock(self):
        for _ in range(random.randint(2, 5)):
            payload = adjustment_data(max_out=self.state.current_stock)
            with self.client.post(
                f"/inventory/{self.state.inventory_id}/adjust",
                json=payload,
                catch_response=True,
                name="POST /inventory/{id}/adjust",
            ) as resp:
                if resp.status_code == 200:
                    self.state.current_stock = resp.json()["current_stock"]
                else:
                    resp.failure(f"Adjust failed: {resp.status_code}: {extract_error_detail(resp)}")

    @task
    def list_movements(self):
        with self.client.get(
            f"/inventory/{self.state.inventory_id}/movements",
            catch_response=True,
            name="GET /inventory/{id}/movements",
        ) as resp:
            if resp.status_code != 200:
                resp.failure(f"Movements failed: {extract_error_detail(resp)}")

    @task
    def done(self):
        self.interrupt()


class TransferJourney(SequentialTaskSet):
    """Two warehouses -> Stock in source -> Transfer part of it across."""

    def on_start(self):
        self.state = TransferState()

    @task
    def create_warehouses(self):
        for attr in ("source_warehouse_id", "destination_warehouse_id"):
            with self.client.post(
                "/warehouses", json=warehouse_data(), catch_response=True, name="POST /warehouses"
            ) as resp:
                if resp.status_code == 201:
                    setattr(self.state, attr, resp.json()["warehouse_id"])
                else:
                    resp.failure(f"Create warehouse failed: {extract_error_detail(resp)}")
                    self.interrupt()

    @task
    def create_source_record(self):
        payload = stock_record_data(warehouse_id=self.state.source_warehouse_id, current_stock=60)
        with self.client.post("/inventory", json=payload, catch_response=True, name="POST /inventory") as resp:
            if resp.status_code == 201:
                self.state.source_inventory_id = resp.json()["inventory_id"]
                self.state.source_stock = 60
            else:
                resp.failure(f"Create stock record failed: {extract_error_detail(resp)}")
                self.interrupt()

    @task
    def transfer(self):
        quantity = random.randint(1, self.state.source_stock)
        with self.client.post(
            f"/inventory/{self.state.source_inventory_id}/transfer",
            json={"to_warehouse": self.state.destination_warehouse_id, "quantity": quantity},
            catch_response=True,
            name="POST /inventory/{id}/transfer",
        ) as resp:
            if resp.status_code == 200:
                body = resp.json()
                if body["source"]["current_stock"] + body["destination"]["current_stock"] != 60:
                    resp.failure("Transfer did not conserve stock")
            else:
                resp.failure(f"Transfer failed: {resp.status_code}: {extract_error_detail(resp)}")

    @task
    def done(self):
        self.interrupt()


class DashboardJourney(SequentialTaskSet):
    """Read-only queries a stock dashboard polls."""

    @task
    def stats(self):
        self.client.get("/inventory/stats", name="GET /inventory/stats")

    @task
    def low_stock(self):
        self.client.get("/inventory/low-stock", name="GET /inventory/low-stock")

    @task
    def out_of_stock(self):
        self.client.get("/inventory/out-of-stock", name="GET /inventory/out-of-stock")

    @task
    def first_page(self):
        self.client.get("/inventory?page=1&limit=20", name="GET /inventory")

    @task
    def done(self):
        self.interrupt()


class InventoryUser(HttpUser):
    """Locust user simulating stock ledger traffic.

    Weighted distribution:
    - 50% Receive and sell
    - 20% Transfers
    - 30% Dashboard reads
    """

    wait_time = between(0.5, 2.0)
    tasks = {
        ReceiveAndSellJourney: 5,
        TransferJourney: 2,
        DashboardJourney: 3,
    }
