"""Catalogue browsing load test scenario."""

import random

from locust import HttpUser, between, task

from loadtests.helpers.response import data_of, extract_error_detail


class BrowsingUser(HttpUser):
    """Anonymous shopper paging through products and categories."""

    wait_time = between(0.5, 2.0)

    def on_start(self):
        self.product_ids: list[str] = []

    @task(5)
    def list_products(self):
        with self.client.get(
            "/products",
            params={"page": random.randint(1, 3), "limit": 20},
            catch_response=True,
            name="GET /products",
        ) as resp:
            if resp.status_code == 200:
                self.product_ids = [product["id"] for product in data_of(resp)["products"]] or self.product_ids
            else:
                resp.failure(f"List products failed: {resp.status_code} - {extract_error_detail(resp)}")

    @task(3)
    def view_product(self):
        if not self.product_ids:
            return
        with self.client.get(
            f"/products/{random.choice(self.product_ids)}",
            catch_response=True,
            name="GET /products/{id}",
        ) as resp:
            if resp.status_code != 200:
                resp.failure(f"View product failed: {resp.status_code} - {extract_error_detail(resp)}")

    @task(1)
    def list_categories(self):
        self.client.get("/categories", name="GET /categories")
