"""Checkout load test scenarios.

``CheckoutJourney`` walks one shopper from an empty cart to a placed (and
sometimes cancelled) order. ``LastUnitRushUser`` points every shopper at a
single low-stock product so concurrent checkouts contend for the same rows;
a 400 "Insufficient stock" is the expected outcome for all but the winners.
"""

import random

from locust import HttpUser, SequentialTaskSet, between, events, task

from loadtests.data_generators import address_data, order_data, product_data
from loadtests.helpers.auth import admin_headers, shopper_headers
from loadtests.helpers.response import data_of, extract_error_detail
from loadtests.helpers.state import ShopperState

HOT_PRODUCT_STOCK = 5
_hot_product: dict = {}


class CheckoutJourney(SequentialTaskSet):
    """Save Address -> Browse -> Add to Cart -> Preview -> Place Order -> (Cancel)."""

    def on_start(self):
        self.state = ShopperState()
        self.headers = shopper_headers()

    @task
    def save_address(self):
        with self.client.post(
            "/addresses",
            json=address_data(is_default=True),
            headers=self.headers,
            catch_response=True,
            name="POST /addresses",
        ) as resp:
            if resp.status_code == 201:
                self.state.address_id = data_of(resp)["id"]
            else:
                resp.failure(f"Save address failed: {resp.status_code} - {extract_error_detail(resp)}")
                self.interrupt()

    @task
    def browse(self):
        with self.client.get("/products", params={"limit": 50}, catch_response=True, name="GET /products") as resp:
            products = data_of(resp)["products"] if resp.status_code == 200 else []
            self.state.product_ids = [product["id"] for product in products if product["stock"] > 0]
            if not self.state.product_ids:
                resp.failure("No products in stock")
                self.interrupt()

    @task
    def add_to_cart(self):
        for product_id in random.sample(self.state.product_ids, k=min(3, len(self.state.product_ids))):
            with self.client.post(
                "/cart/items",
                json={"product_id": product_id, "quantity": random.randint(1, 2)},
                headers=self.headers,
                catch_response=True,
                name="POST /cart/items",
            ) as resp:
                if resp.status_code == 201:
                    self.state.cart_item_ids.append(data_of(resp)["id"])
                else:
                    resp.failure(f"Add to cart failed: {resp.status_code} - {extract_error_detail(resp)}")

    @task
    def preview(self):
        with self.client.post(
            "/orders/checkout",
            json={},
            headers=self.headers,
            catch_response=True,
            name="POST /orders/checkout",
        ) as resp:
            if resp.status_code != 200:
                resp.failure(f"Preview failed: {resp.status_code} - {extract_error_detail(resp)}")
                self.interrupt()

    @task
    def place_order(self):
        with self.client.post(
            "/orders",
            json=order_data(self.state.address_id),
            headers=self.headers,
            catch_response=True,
            name="POST /orders",
        ) as resp:
            if resp.status_code == 201:
                order = data_of(resp)
                self.state.order_id = order["id"]
                self.state.order_status = order["status"]
            else:
                resp.failure(f"Place order failed: {resp.status_code} - {extract_error_detail(resp)}")
                self.interrupt()

    @task
    def maybe_cancel(self):
        if random.random() < 0.3:
            self.client.post(
                f"/orders/{self.state.order_id}/cancel",
                headers=self.headers,
                name="POST /orders/{id}/cancel",
            )
        self.interrupt()


class ShopperUser(HttpUser):
    wait_time = between(1.0, 3.0)
    tasks = [CheckoutJourney]


@events.test_start.add_listener
def create_hot_product(environment, **_kwargs):
    """Create the low-stock product every LastUnitRushUser competes for."""
    if not any(user_class is LastUnitRushUser for user_class in environment.user_classes):
        return
    import requests

    resp = requests.post(
        f"{environment.host}/products",
        json=product_data(stock=HOT_PRODUCT_STOCK),
        headers=admin_headers(),
        timeout=10,
    )
    resp.raise_for_status()
    _hot_product.update(data_of(resp))
    print(f"[LOADTEST] Hot product {_hot_product['id']} with stock {HOT_PRODUCT_STOCK}")


class LastUnitRushUser(HttpUser):
    """Every user tries to buy the same scarce product at once."""

    wait_time = between(0.1, 0.5)

    def on_start(self):
        self.headers = shopper_headers()
        resp = self.client.post("/addresses", json=address_data(), headers=self.headers, name="POST /addresses")
        self.address_id = data_of(resp)["id"] if resp.status_code == 201 else None

    @task
    def rush(self):
        if not _hot_product or self.address_id is None:
            return
        self.client.delete("/cart", headers=self.headers, name="DELETE /cart")
        added = self.client.post(
            "/cart/items",
            json={"product_id": _hot_product["id"], "quantity": 1},
            headers=self.headers,
            name="POST /cart/items [hot]",
        )
        if added.status_code != 201:
            return
        with self.client.post(
            "/orders",
            json=order_data(self.address_id, payment_method="COD"),
            headers=self.headers,
            catch_response=True,
            name="POST /orders [hot]",
        ) as resp:
            if resp.status_code == 400 and "Insufficient stock" in extract_error_detail(resp):
                resp.success()
            elif resp.status_code != 201:
                resp.failure(f"Unexpected checkout result: {resp.status_code} - {extract_error_detail(resp)}")
