"""Faker-based data generators for Locust load test scenarios.

Each generator produces payloads that pass the API's request validation
(10-digit phone, 6-digit pincode, field lengths) and match the exact field
names expected by the Pydantic request schemas.
"""

import random
import uuid

from faker import Faker

fake = Faker("en_IN")

ADDRESS_TYPES = ["HOME", "WORK", "OTHER"]
PREPAID_METHODS = ["CARD", "UPI", "NETBANKING"]


def valid_phone() -> str:
    """Ten digits, first digit 6-9 like an Indian mobile number."""
    return f"{random.randint(6, 9)}{random.randint(0, 999_999_999):09d}"


def valid_pincode() -> str:
    return f"{random.randint(110_000, 855_999):06d}"


def address_data(is_default: bool = False) -> dict:
    return {
        "name": fake.name()[:100],
        "phone": valid_phone(),
        "street": fake.street_address()[:200].ljust(5, "."),
        "city": fake.city()[:50].ljust(2, "."),
        "state": fake.state()[:50].ljust(2, "."),
        "pincode": valid_pincode(),
        "type": random.choice(ADDRESS_TYPES),
        "is_default": is_default,
    }


def product_data(stock: int | None = None) -> dict:
    price = random.randint(99, 4999)
    on_sale = random.random() < 0.3
    return {
        "name": f"{fake.color_name()} {fake.word().title()} {uuid.uuid4().hex[:4]}",
        "description": fake.sentence(nb_words=12),
        "price": f"{price}.00",
        "sale_price": f"{int(price * 0.8)}.00" if on_sale else None,
        "stock": stock if stock is not None else random.randint(50, 500),
    }


def order_data(address_id: str, payment_method: str | None = None) -> dict:
    return {
        "address_id": address_id,
        "payment_method": payment_method or random.choice(["COD", *PREPAID_METHODS]),
        "notes": fake.sentence(nb_words=6) if random.random() < 0.2 else None,
    }
