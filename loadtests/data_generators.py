"""Faker-based data generators for Locust load test scenarios.

Payloads match the field names of the API's Pydantic request schemas and
pass the domain's validation rules (slug pattern, warehouse code length,
non-negative stock).
"""

import random
import uuid

from faker import Faker

fake = Faker()

SIZES = ["XS", "S", "M", "L", "XL"]


# ---------- Catalogue ----------


def valid_sku(prefix: str = "LT") -> str:
    """SKUs like 'LT-A1B2C3D4'."""
    return f"{prefix}-{uuid.uuid4().hex[:8].upper()}"


def valid_slug() -> str:
    """Slugs matching ^[a-z0-9]+(-[a-z0-9]+)*$."""
    words = fake.words(nb=2)
    return "-".join(w.lower() for w in words if w.isalnum()) + f"-{uuid.uuid4().hex[:6]}"


def size_inventory(sizes: list[str] | None = None) -> dict:
    sizes = sizes or random.sample(SIZES, k=random.randint(1, len(SIZES)))
    return {size: random.randint(0, 40) for size in sizes}


def product_data(sized: bool = True) -> dict:
    """CreateProductRequest payload."""
    payload = {
        "name": fake.catch_phrase()[:200],
        "slug": valid_slug(),
        "sku": valid_sku(),
        "description": fake.paragraph(nb_sentences=2),
        "manage_stock": True,
        "allow_backorders": random.random() < 0.2,
        "reorder_point": random.choice([0, 5, 10]),
    }
    if sized:
        payload["size_inventory"] = size_inventory()
    else:
        payload["stock_quantity"] = random.randint(0, 100)
    return payload


def variation_data() -> dict:
    price = round(random.uniform(10, 200), 2)
    return {
        "sku": valid_sku("VAR"),
        "price": price,
        "sale_price": round(price * 0.8, 2) if random.random() < 0.3 else None,
        "attributes": {"color": fake.safe_color_name()},
        "stock_quantity": random.randint(0, 50),
    }


# ---------- Inventory ----------


def warehouse_data() -> dict:
    """CreateWarehouseRequest payload with a unique code."""
    return {
        "name": f"{fake.city()} Warehouse"[:100],
        "code": f"WH-{uuid.uuid4().hex[:6].upper()}",
        "address": {
            "address_line1": fake.street_address()[:255],
            "city": fake.city()[:100],
            "state": fake.state_abbr(),
            "postal_code": fake.zipcode(),
            "country": "US",
        },
        "contact_person": fake.name(),
        "email": fake.company_email(),
    }


def stock_record_data(warehouse_id: str = "main", current_stock: int = 100, size: str | None = None) -> dict:
    """CreateStockRecordRequest payload for a fresh product."""
    return {
        "product_id": f"prod-{uuid.uuid4().hex[:12]}",
        "size": size,
        "warehouse_id": warehouse_id,
        "current_stock": current_stock,
        "reorder_point": random.choice([5, 10, 20]),
        "reorder_quantity": 50,
    }


def adjustment_data(max_out: int = 0) -> dict:
    """AdjustStockRequest payload: a restock, or a sale bounded by max_out."""
    if max_out > 0 and random.random() < 0.6:
        return {
            "quantity": -random.randint(1, max_out),
            "type": "OUT",
            "reference_id": f"ORD-{uuid.uuid4().hex[:6]}",
            "reference_type": "order",
        }
    return {
        "quantity": random.randint(5, 50),
        "type": "IN",
        "reference_id": f"PO-{uuid.uuid4().hex[:6]}",
        "reference_type": "purchase_order",
    }
