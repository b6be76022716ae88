"""Faker-based data generators for Locust load test scenarios.

Payloads match the field names of the API's Pydantic request schemas.
"""

import random
import uuid

from faker import Faker

fake = Faker()

ERAS = ["1920s", "1950s", "1960s", "1970s", "1980s", "1990s"]
CONDITIONS = ["Mint", "Excellent", "Good", "Fair"]
COLORS = ["Black", "Brown", "Cream", "Green", "Mustard", "Navy", "Red"]
SIZES = ["XS", "S", "M", "L", "XL"]


def user_id(prefix: str) -> str:
    """Ids like 'buyer-lt-a1b2c3d4'."""
    return f"{prefix}-lt-{uuid.uuid4().hex[:8]}"


def headers(acting_user_id: str) -> dict:
    return {"X-User-Id": acting_user_id}


def product_data(stock: int | None = None) -> dict:
    """ListProductRequest payload."""
    word = fake.word().capitalize()
    return {
        "title": f"Vintage {word} {random.choice(['Jacket', 'Lamp', 'Chair', 'Vase', 'Record'])}",
        "price": round(random.uniform(5.0, 400.0), 2),
        "stock": random.randint(1, 8) if stock is None else stock,
        "colors": random.sample(COLORS, k=2),
        "sizes": random.sample(SIZES, k=2),
        "images": [fake.image_url()],
        "description": fake.sentence(nb_words=12),
        "condition": random.choice(CONDITIONS),
        "era": random.choice(ERAS),
    }


def line_item_data(product: dict, product_id: str, status: str = "cart") -> dict:
    """AddLineItemRequest payload picking one of the product's variants."""
    return {
        "product_id": product_id,
        "color": random.choice(product["colors"]),
        "size": random.choice(product["sizes"]),
        "quantity": random.randint(1, 3),
        "status": status,
    }


def guest_cart_data(product_ids: list[str]) -> dict:
    """MergeGuestCartRequest payload, including one stale product."""
    lines = [{"product_id": pid, "quantity": random.randint(1, 2)} for pid in product_ids]
    lines.append({"product_id": f"prod-gone-{uuid.uuid4().hex[:6]}", "quantity": 1})
    return {"lines": lines}


def checkout_data() -> dict:
    """PlaceOrderRequest payload with a fresh idempotency key."""
    return {
        "address": fake.address().replace("\n", ", ")[:1000],
        "phone_number": fake.phone_number()[:50],
        "payment": random.choice(["card", "cash on delivery", "bank transfer"]),
        "idempotency_key": uuid.uuid4().hex,
    }
